"""
Unit tests for market regime classification and detection.
"""

import numpy as np
import pytest

from market_engine.analysis.market_regime import (
    MarketRegime,
    RegimeDetector,
    RegimeKind,
    RiskLevel,
    VolatilityLevel,
    calculate_trend,
    calculate_volatility,
    risk_level,
    volatility_level,
)
from market_engine.signal_generation.components import MarketRegimeDetector
from tests.conftest import make_frame


@pytest.fixture
def detector(engine_config):
    return RegimeDetector(engine_config["market_regime"])


def linear(start, stop, bars=25):
    return make_frame(np.linspace(start, stop, bars))


@pytest.mark.unit
class TestClassification:
    """Test the pure trend/volatility classifier."""

    @pytest.mark.parametrize("trend,volatility,expected,confidence", [
        (0.75, 0.3, RegimeKind.BULL, 85),
        (-0.8, 0.5, RegimeKind.BEAR, 80),
        (0.1, 0.85, RegimeKind.TRANSITION, 70),
        (-0.1, 0.85, RegimeKind.TRANSITION, 70),
        (0.0, 0.2, RegimeKind.CRAB, 0),
        # Strong trend with the wrong volatility falls through
        (0.9, 0.7, RegimeKind.CRAB, 0),
        (-0.9, 0.3, RegimeKind.CRAB, 0),
        # Extreme volatility blocks a bull call
        (0.9, 0.9, RegimeKind.TRANSITION, 70),
        # Bear precedes transition
        (-0.9, 0.9, RegimeKind.BEAR, 80),
    ])
    def test_classify_regime(self, detector, trend, volatility, expected, confidence):
        assert detector.classify_regime(trend, volatility) == (expected, confidence)

    def test_thresholds_are_strict(self, detector):
        assert detector.classify_regime(0.7, 0.3)[0] == RegimeKind.CRAB
        assert detector.classify_regime(-0.7, 0.5)[0] == RegimeKind.CRAB
        assert detector.classify_regime(0.0, 0.8)[0] == RegimeKind.CRAB

    @pytest.mark.parametrize("volatility,level,risk", [
        (0.9, VolatilityLevel.EXTREME, RiskLevel.EXTREME),
        (0.8, VolatilityLevel.HIGH, RiskLevel.HIGH),
        (0.7, VolatilityLevel.HIGH, RiskLevel.HIGH),
        (0.6, VolatilityLevel.MEDIUM, RiskLevel.MEDIUM),
        (0.5, VolatilityLevel.MEDIUM, RiskLevel.MEDIUM),
        (0.4, VolatilityLevel.LOW, RiskLevel.MEDIUM),
        (0.01, VolatilityLevel.LOW, RiskLevel.MEDIUM),
    ])
    def test_volatility_and_risk_bands(self, volatility, level, risk):
        assert volatility_level(volatility) == level
        assert risk_level(volatility) == risk

    def test_build_regime_record(self, detector):
        regime = detector.build_regime(-1.4, 0.5)

        assert regime.regime == RegimeKind.BEAR
        assert regime.trend_strength == 1.0
        assert regime.narrative == "Bearish momentum with elevated volatility"
        assert regime.to_dict()["dominant_narrative"] == regime.narrative

    def test_regime_validation(self):
        with pytest.raises(ValueError):
            MarketRegime(
                regime=RegimeKind.BULL,
                confidence=120,
                volatility_level=VolatilityLevel.LOW,
                trend_strength=0.5,
                narrative="",
                risk_level=RiskLevel.MEDIUM,
            )


@pytest.mark.unit
class TestDetection:
    """Test detection over price series."""

    def test_statistics(self):
        frame = make_frame([100.0, 110.0, 99.0])
        # returns +0.1 and -0.1
        assert calculate_volatility(frame) == pytest.approx(0.1)
        assert calculate_trend(frame) == pytest.approx(-0.01)

    def test_short_series_uses_neutral_defaults(self, detector):
        regime = detector.detect(linear(100, 500, bars=19))

        assert regime.regime == RegimeKind.CRAB
        assert regime.confidence == 0
        assert regime.volatility_level == VolatilityLevel.MEDIUM
        assert regime.risk_level == RiskLevel.MEDIUM
        assert regime.trend_strength == 0.0

    def test_steady_rally_is_bull(self, detector):
        regime = detector.detect(linear(100, 200))

        assert regime.regime == RegimeKind.BULL
        assert regime.confidence == 85
        assert regime.trend_strength == pytest.approx(1.0)
        assert regime.volatility_level == VolatilityLevel.LOW

    def test_trend_strength_is_clamped(self, detector):
        assert detector.detect(linear(100, 300)).trend_strength == 1.0

    def test_calm_decline_is_not_bear(self, detector):
        regime = detector.detect(linear(200, 50))
        assert regime.trend == pytest.approx(-0.75)
        assert regime.regime == RegimeKind.CRAB

    def test_volatile_decline_is_bear(self, detector):
        regime = detector.detect(make_frame([100.0, 200.0] * 10 + [25.0]))

        assert regime.regime == RegimeKind.BEAR
        assert regime.volatility_level == VolatilityLevel.HIGH
        assert regime.risk_level == RiskLevel.HIGH

    def test_whipsaw_is_transition(self, detector):
        regime = detector.detect(make_frame([100.0, 300.0] * 10 + [100.0]))

        assert regime.regime == RegimeKind.TRANSITION
        assert regime.volatility_level == VolatilityLevel.EXTREME
        assert regime.risk_level == RiskLevel.EXTREME


@pytest.mark.unit
class TestMarketRegimeDetector:
    """Test the regime detector component and its history."""

    @pytest.fixture
    def component(self, engine_config):
        return MarketRegimeDetector(engine_config["market_regime"])

    def test_reference_symbol_is_selected(self, component):
        regime = component.detect_regime({"BTC": linear(100, 200), "ETH": linear(200, 50)})
        assert regime.regime == RegimeKind.BULL

    def test_reference_symbol_override(self, component):
        market_data = {"BTC": linear(100, 200), "ETH": make_frame([100.0, 300.0] * 10 + [100.0])}
        assert component.detect_regime(market_data, "ETH").regime == RegimeKind.TRANSITION

    def test_missing_reference_is_neutral(self, component):
        regime = component.detect_regime({"ETH": linear(100, 200)})

        assert regime.regime == RegimeKind.CRAB
        assert regime.confidence == 0
        assert regime.volatility_level == VolatilityLevel.MEDIUM

    def test_initial_state(self, component):
        assert component.get_current_regime() is None
        assert component.get_regime_history() == []
        assert component.get_regime_duration() == 0
        assert not component.is_regime_stable()

    def test_duration_and_stability(self, component):
        for _ in range(3):
            component.detect_regime(linear(100, 200))

        assert component.get_current_regime().regime == RegimeKind.BULL
        assert component.get_regime_duration() == 3
        assert component.is_regime_stable(periods=3)

        component.detect_regime(linear(100, 101))

        assert component.get_regime_duration() == 1
        assert not component.is_regime_stable(periods=3)
        assert len(component.get_regime_history()) == 4

    def test_history_is_bounded(self, engine_config):
        config = dict(engine_config["market_regime"], history_size=3)
        component = MarketRegimeDetector(config)

        for _ in range(5):
            component.detect_regime(linear(100, 200))

        assert len(component.get_regime_history()) == 3
