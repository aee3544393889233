"""
Unit tests for core signal generation records.
"""

from datetime import datetime

import pytest

from market_engine.signal_generation.core import (
    CONSENSUS_TIMEFRAME,
    IndicatorSnapshot,
    InstitutionalFlow,
    MacdReading,
    PriceBar,
    SentimentAnalysis,
    Signal,
    SignalKind,
    SupportResistance,
    SymbolAnalysis,
    VolumeProfile,
    WhaleActivity,
    bars_to_frame,
)
from tests.conftest import make_signal


class TestSignalKind:
    """Test the SignalKind enumeration."""

    def test_buy_and_sell_sides(self):
        assert SignalKind.BUY.is_buy
        assert SignalKind.STRONG_BUY.is_buy
        assert SignalKind.SELL.is_sell
        assert SignalKind.STRONG_SELL.is_sell
        assert not SignalKind.HOLD.is_buy
        assert not SignalKind.HOLD.is_sell


class TestIndicatorRecords:
    """Test MACD readings, levels and snapshots."""

    def test_macd_default_is_neutral(self):
        reading = MacdReading()
        assert reading.direction == 0
        assert reading.histogram == 0.0

    def test_macd_rejects_invalid_values(self):
        with pytest.raises(ValueError):
            MacdReading(direction=2, histogram=1.0)
        with pytest.raises(ValueError):
            MacdReading(direction=1, histogram=-0.5)

    def test_support_must_not_exceed_resistance(self):
        with pytest.raises(ValueError):
            SupportResistance(support=110.0, resistance=100.0)

        levels = SupportResistance(support=100.0, resistance=100.0)
        assert levels.support == levels.resistance

    def test_snapshot_dict_round_trip(self):
        snapshot = IndicatorSnapshot(
            rsi=42.5,
            macd=MacdReading(-1, 0.75),
            volume_profile=VolumeProfile.DISTRIBUTION,
            support_resistance=SupportResistance(95.0, 105.0),
        )

        data = snapshot.to_dict()
        assert data["macd"] == {"signal": -1, "histogram": 0.75}
        assert data["volume_profile"] == "distribution"
        assert IndicatorSnapshot.from_dict(data) == snapshot


class TestSignal:
    """Test the Signal data class."""

    def test_signal_creation(self):
        """Test creating a signal with valid data."""
        signal = make_signal(SignalKind.BUY, confidence=72, patterns=["double_bottom"])

        assert signal.symbol == "BTC"
        assert signal.kind == SignalKind.BUY
        assert signal.confidence == 72
        assert signal.timeframe == "1h"
        assert signal.reasoning == ("test",)
        assert signal.patterns == ("double_bottom",)
        assert isinstance(signal.timestamp, datetime)
        assert not signal.is_consensus

    def test_signal_validation(self):
        """Test signal validation."""
        with pytest.raises(ValueError, match="Confidence"):
            make_signal(SignalKind.BUY, confidence=101)

        with pytest.raises(ValueError, match="Confidence"):
            make_signal(SignalKind.BUY, confidence=-1)

        with pytest.raises(ValueError, match="Prices"):
            make_signal(SignalKind.BUY, stop=-1.0)

    def test_signal_is_immutable(self):
        signal = make_signal(SignalKind.SELL)
        with pytest.raises(AttributeError):
            signal.confidence = 90

    def test_risk_reward_ratio(self):
        signal = make_signal(SignalKind.BUY, entry=100.0, target=106.0, stop=97.0)
        assert signal.risk_reward_ratio == pytest.approx(2.0)

    def test_risk_reward_ratio_without_risk_leg(self):
        signal = make_signal(SignalKind.HOLD, entry=100.0, target=100.0, stop=100.0)
        assert signal.risk_reward_ratio == 0.0

    def test_consensus_timeframe(self):
        signal = make_signal(SignalKind.BUY, timeframe=CONSENSUS_TIMEFRAME)
        assert signal.is_consensus

    def test_signal_to_dict(self):
        """Test converting signal to dictionary."""
        signal = make_signal(SignalKind.STRONG_SELL, confidence=80, entry=100.0, target=94.0, stop=103.0)
        data = signal.to_dict()

        assert data["signal"] == "STRONG_SELL"
        assert data["confidence"] == 80
        assert data["risk_reward_ratio"] == pytest.approx(2.0)
        assert data["reasoning"] == ["test"]
        assert data["indicators"]["rsi"] == 50.0
        assert "timestamp" in data

    def test_signal_from_dict(self):
        """Test creating signal from dictionary."""
        original = make_signal(SignalKind.BUY, confidence=66, patterns=["flag"])
        restored = Signal.from_dict(original.to_dict())

        assert restored == original


class TestSentimentAnalysis:
    """Test the SentimentAnalysis data class."""

    def _make(self, **overrides):
        values = dict(
            symbol="ETH",
            overall_sentiment=0.2,
            fear_greed_index=60,
            social_mentions=100,
            whale_activity=WhaleActivity.NEUTRAL,
            institutional_flow=InstitutionalFlow.NEUTRAL,
            news_sentiment=0.1,
        )
        values.update(overrides)
        return SentimentAnalysis(**values)

    def test_valid_record(self):
        sentiment = self._make(sources={"twitter": 0.2})
        data = sentiment.to_dict()
        assert data["whale_activity"] == "neutral"
        assert data["sources"] == {"twitter": 0.2}

    def test_sources_are_read_only(self):
        readings = {"twitter": 0.2}
        sentiment = self._make(sources=readings)

        readings["twitter"] = -1.0
        assert sentiment.sources["twitter"] == 0.2

        with pytest.raises(TypeError):
            sentiment.sources["reddit"] = 0.5

    @pytest.mark.parametrize("field_name,value", [
        ("overall_sentiment", 1.5),
        ("news_sentiment", -1.1),
        ("fear_greed_index", 101),
        ("social_mentions", -1),
        ("sources", {"reddit": 2.0}),
    ])
    def test_out_of_range_values_rejected(self, field_name, value):
        with pytest.raises(ValueError):
            self._make(**{field_name: value})


class TestSymbolAnalysis:
    """Test the per-symbol cache record."""

    def test_consensus_lookup(self):
        consensus = make_signal(SignalKind.BUY, timeframe=CONSENSUS_TIMEFRAME)
        hourly = make_signal(SignalKind.BUY, timeframe="1h")
        analysis = SymbolAnalysis(symbol="BTC", signals=[consensus, hourly])

        assert analysis.consensus is consensus
        assert analysis.timeframe_signals() == [hourly]
        assert isinstance(analysis.signals, tuple)

    def test_no_consensus(self):
        analysis = SymbolAnalysis(symbol="BTC", signals=[make_signal(SignalKind.HOLD)])
        assert analysis.consensus is None


class TestBarsToFrame:
    """Test conversion of PriceBar sequences."""

    def test_converts_bars_in_order(self):
        bars = [
            PriceBar(datetime(2024, 1, 1, hour), 100.0 + hour, 101.0 + hour, 99.0 + hour, 100.5 + hour, 10.0)
            for hour in range(3)
        ]
        frame = bars_to_frame(bars)

        assert list(frame.columns) == ["open", "high", "low", "close", "volume"]
        assert frame["close"].tolist() == [100.5, 101.5, 102.5]
        assert frame.index[0] == datetime(2024, 1, 1, 0)

    def test_empty_sequence(self):
        frame = bars_to_frame([])
        assert frame.empty
        assert "close" in frame.columns
