"""
Core data structures for the Market Signal Engine.

This module defines the records produced by the signal generation pipeline:
per-timeframe and consensus signals, the global market regime and per-symbol
sentiment, together with the enumerations used to classify them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from ..analysis.market_regime import MarketRegime, RegimeKind, RiskLevel, VolatilityLevel

__all__ = [
    "CONSENSUS_TIMEFRAME",
    "DEFAULT_TIMEFRAMES",
    "OHLCV_COLUMNS",
    "SignalKind",
    "VolumeProfile",
    "RegimeKind",
    "VolatilityLevel",
    "RiskLevel",
    "WhaleActivity",
    "InstitutionalFlow",
    "PriceBar",
    "bars_to_frame",
    "MacdReading",
    "SupportResistance",
    "IndicatorSnapshot",
    "Signal",
    "MarketRegime",
    "SentimentAnalysis",
    "SymbolAnalysis",
]


CONSENSUS_TIMEFRAME = "consensus"
DEFAULT_TIMEFRAMES: Tuple[str, ...] = ("1m", "5m", "15m", "1h", "4h", "1d")
OHLCV_COLUMNS = ["open", "high", "low", "close", "volume"]


class SignalKind(Enum):
    """Directional call emitted for a symbol."""
    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"

    @property
    def is_buy(self) -> bool:
        return self in (SignalKind.BUY, SignalKind.STRONG_BUY)

    @property
    def is_sell(self) -> bool:
        return self in (SignalKind.SELL, SignalKind.STRONG_SELL)


class VolumeProfile(Enum):
    """Classification of recent volume against the longer window."""
    ACCUMULATION = "accumulation"
    DISTRIBUTION = "distribution"
    NEUTRAL = "neutral"


class WhaleActivity(Enum):
    """Large-holder behaviour for a symbol."""
    ACCUMULATING = "accumulating"
    DISTRIBUTING = "distributing"
    NEUTRAL = "neutral"


class InstitutionalFlow(Enum):
    """Direction of institutional capital for a symbol."""
    INFLOW = "inflow"
    OUTFLOW = "outflow"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class PriceBar:
    """One OHLCV observation."""
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float


def bars_to_frame(bars: Sequence[PriceBar]) -> pd.DataFrame:
    """
    Convert a sequence of PriceBar into an OHLCV DataFrame indexed by timestamp.

    Args:
        bars: Bars in ascending timestamp order

    Returns:
        pd.DataFrame: Frame with open, high, low, close and volume columns
    """
    if not bars:
        return pd.DataFrame(columns=OHLCV_COLUMNS)

    return pd.DataFrame(
        {
            "open": [bar.open for bar in bars],
            "high": [bar.high for bar in bars],
            "low": [bar.low for bar in bars],
            "close": [bar.close for bar in bars],
            "volume": [bar.volume for bar in bars],
        },
        index=pd.DatetimeIndex([bar.timestamp for bar in bars], name="timestamp"),
    )


@dataclass(frozen=True)
class MacdReading:
    """Direction of EMA12 - EMA26 and the magnitude of the difference."""
    direction: int = 0
    histogram: float = 0.0

    def __post_init__(self):
        if self.direction not in (-1, 0, 1):
            raise ValueError("MACD direction must be -1, 0 or 1")
        if self.histogram < 0:
            raise ValueError("MACD histogram must be non-negative")


@dataclass(frozen=True)
class SupportResistance:
    """Support and resistance levels over an analysis window."""
    support: float
    resistance: float

    def __post_init__(self):
        if self.support > self.resistance:
            raise ValueError("Support must not exceed resistance")


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Indicator values used to build a signal."""
    rsi: float
    macd: MacdReading
    volume_profile: VolumeProfile
    support_resistance: SupportResistance

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rsi": self.rsi,
            "macd": {"signal": self.macd.direction, "histogram": self.macd.histogram},
            "volume_profile": self.volume_profile.value,
            "support_resistance": {
                "support": self.support_resistance.support,
                "resistance": self.support_resistance.resistance,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndicatorSnapshot":
        return cls(
            rsi=data["rsi"],
            macd=MacdReading(data["macd"]["signal"], data["macd"]["histogram"]),
            volume_profile=VolumeProfile(data["volume_profile"]),
            support_resistance=SupportResistance(
                data["support_resistance"]["support"],
                data["support_resistance"]["resistance"],
            ),
        )


@dataclass(frozen=True)
class Signal:
    """
    A trading signal for one symbol on one timeframe (or the consensus).

    Attributes:
        symbol: Trading symbol
        kind: Directional call
        confidence: Integer confidence from 0 to 100
        timeframe: Bar interval label, or "consensus"
        entry_price: Price the call is made at
        target_price: Profit target
        stop_loss: Protective stop
        indicators: Indicator snapshot the call was built from
        reasoning: Ordered human-readable reasons
        patterns: Names of detected chart patterns
        timestamp: Time the signal was generated
    """
    symbol: str
    kind: SignalKind
    confidence: int
    timeframe: str
    entry_price: float
    target_price: float
    stop_loss: float
    indicators: IndicatorSnapshot
    reasoning: Tuple[str, ...] = ()
    patterns: Tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not 0 <= self.confidence <= 100:
            raise ValueError("Confidence must be between 0 and 100")
        if min(self.entry_price, self.target_price, self.stop_loss) < 0:
            raise ValueError("Prices must be non-negative")
        # Accept lists from callers but store immutable tuples
        object.__setattr__(self, "reasoning", tuple(self.reasoning))
        object.__setattr__(self, "patterns", tuple(self.patterns))

    @property
    def is_consensus(self) -> bool:
        return self.timeframe == CONSENSUS_TIMEFRAME

    @property
    def risk_reward_ratio(self) -> float:
        """|target - entry| / |entry - stop|, or 0.0 when there is no risk leg."""
        risk = abs(self.entry_price - self.stop_loss)
        if risk == 0:
            return 0.0
        return abs(self.target_price - self.entry_price) / risk

    def to_dict(self) -> Dict[str, Any]:
        """Convert signal to dictionary."""
        return {
            "symbol": self.symbol,
            "signal": self.kind.value,
            "confidence": self.confidence,
            "timeframe": self.timeframe,
            "entry_price": self.entry_price,
            "target_price": self.target_price,
            "stop_loss": self.stop_loss,
            "risk_reward_ratio": self.risk_reward_ratio,
            "reasoning": list(self.reasoning),
            "patterns": list(self.patterns),
            "indicators": self.indicators.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Signal":
        """Create signal from dictionary."""
        timestamp = data.get("timestamp")
        return cls(
            symbol=data["symbol"],
            kind=SignalKind(data["signal"]),
            confidence=data["confidence"],
            timeframe=data["timeframe"],
            entry_price=data["entry_price"],
            target_price=data["target_price"],
            stop_loss=data["stop_loss"],
            indicators=IndicatorSnapshot.from_dict(data["indicators"]),
            reasoning=tuple(data.get("reasoning", ())),
            patterns=tuple(data.get("patterns", ())),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else datetime.now(),
        )


@dataclass(frozen=True)
class SentimentAnalysis:
    """Composite multi-source sentiment for one symbol."""
    symbol: str
    overall_sentiment: float
    fear_greed_index: int
    social_mentions: int
    whale_activity: WhaleActivity
    institutional_flow: InstitutionalFlow
    news_sentiment: float
    sources: Mapping[str, float] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not -1.0 <= self.overall_sentiment <= 1.0:
            raise ValueError("Overall sentiment must be between -1.0 and 1.0")
        if not -1.0 <= self.news_sentiment <= 1.0:
            raise ValueError("News sentiment must be between -1.0 and 1.0")
        if not 0 <= self.fear_greed_index <= 100:
            raise ValueError("Fear/greed index must be between 0 and 100")
        if self.social_mentions < 0:
            raise ValueError("Social mentions must be non-negative")
        for source, score in self.sources.items():
            if not -1.0 <= score <= 1.0:
                raise ValueError(f"Sentiment for source {source} must be between -1.0 and 1.0")
        # Stored as a read-only copy
        object.__setattr__(self, "sources", MappingProxyType(dict(self.sources)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "overall_sentiment": self.overall_sentiment,
            "fear_greed_index": self.fear_greed_index,
            "social_mentions": self.social_mentions,
            "whale_activity": self.whale_activity.value,
            "institutional_flow": self.institutional_flow.value,
            "news_sentiment": self.news_sentiment,
            "sources": dict(self.sources),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class SymbolAnalysis:
    """Most recent signals and sentiment computed for a symbol."""
    symbol: str
    signals: Tuple[Signal, ...] = ()
    sentiment: Optional[SentimentAnalysis] = None
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        object.__setattr__(self, "signals", tuple(self.signals))

    @property
    def consensus(self) -> Optional[Signal]:
        for signal in self.signals:
            if signal.is_consensus:
                return signal
        return None

    def timeframe_signals(self) -> List[Signal]:
        return [signal for signal in self.signals if not signal.is_consensus]
