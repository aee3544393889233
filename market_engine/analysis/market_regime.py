"""
Market Regime Detection System.

This module provides the core logic for classifying the global market regime
(bull, bear, crab, transition) from the return volatility and net trend of a
reference series. Classification is a pure function of those two statistics,
so it can be tested and reused independently of how they were measured.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Tuple

import numpy as np
import pandas as pd


class RegimeKind(Enum):
    """Enumeration for different market regimes."""
    BULL = "bull"
    BEAR = "bear"
    CRAB = "crab"
    TRANSITION = "transition"


class VolatilityLevel(Enum):
    """Banding of return volatility."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class RiskLevel(Enum):
    """Risk banding reported with a regime; never lower than medium."""
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


@dataclass(frozen=True)
class MarketRegime:
    """Data class to store the detected market regime and related information."""
    regime: RegimeKind
    confidence: int
    volatility_level: VolatilityLevel
    trend_strength: float
    narrative: str
    risk_level: RiskLevel
    volatility: float = 0.0
    trend: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not 0 <= self.confidence <= 100:
            raise ValueError("Confidence must be between 0 and 100")
        if not 0.0 <= self.trend_strength <= 1.0:
            raise ValueError("Trend strength must be between 0.0 and 1.0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "regime": self.regime.value,
            "confidence": self.confidence,
            "volatility": self.volatility_level.value,
            "trend_strength": self.trend_strength,
            "dominant_narrative": self.narrative,
            "risk_level": self.risk_level.value,
            "timestamp": self.timestamp.isoformat(),
        }


NARRATIVES = {
    RegimeKind.BULL: "Strong uptrend with controlled volatility",
    RegimeKind.BEAR: "Bearish momentum with elevated volatility",
    RegimeKind.TRANSITION: "High volatility regime change in progress",
    RegimeKind.CRAB: "Range-bound market",
}

REGIME_CONFIDENCE = {
    RegimeKind.BULL: 85,
    RegimeKind.BEAR: 80,
    RegimeKind.TRANSITION: 70,
    RegimeKind.CRAB: 0,
}


def calculate_volatility(df: pd.DataFrame) -> float:
    """
    Population standard deviation of close-to-close returns.

    Args:
        df: DataFrame with a close column

    Returns:
        float: Standard deviation of per-bar returns
    """
    closes = df["close"].to_numpy(dtype=float)
    if len(closes) < 2:
        return 0.0
    returns = np.diff(closes) / closes[:-1]
    return float(np.std(returns))


def calculate_trend(df: pd.DataFrame) -> float:
    """
    Signed net return from the first to the last close.

    Args:
        df: DataFrame with a close column

    Returns:
        float: (last close - first close) / first close
    """
    closes = df["close"].to_numpy(dtype=float)
    if len(closes) < 2 or closes[0] == 0:
        return 0.0
    return float((closes[-1] - closes[0]) / closes[0])


def volatility_level(volatility: float) -> VolatilityLevel:
    """Band volatility into low, medium, high or extreme."""
    if volatility > 0.8:
        return VolatilityLevel.EXTREME
    if volatility > 0.6:
        return VolatilityLevel.HIGH
    if volatility > 0.4:
        return VolatilityLevel.MEDIUM
    return VolatilityLevel.LOW


def risk_level(volatility: float) -> RiskLevel:
    """Risk mirrors the upper volatility bands and is medium otherwise."""
    if volatility > 0.8:
        return RiskLevel.EXTREME
    if volatility > 0.6:
        return RiskLevel.HIGH
    return RiskLevel.MEDIUM


class RegimeDetector:
    """
    Classifies the market regime from a reference series.
    """

    def __init__(self, config: Dict):
        """
        Initializes the RegimeDetector with configuration parameters.

        Args:
            config: A dictionary containing configuration parameters.
        """
        self.min_bars = config.get("min_bars", 20)
        self.bull_trend_threshold = config.get("bull_trend_threshold", 0.7)
        self.bull_max_volatility = config.get("bull_max_volatility", 0.6)
        self.bear_trend_threshold = config.get("bear_trend_threshold", -0.7)
        self.bear_min_volatility = config.get("bear_min_volatility", 0.4)
        self.transition_volatility = config.get("transition_volatility", 0.8)
        self.default_volatility = config.get("default_volatility", 0.5)
        self.default_trend = config.get("default_trend", 0.0)

    def classify_regime(self, trend: float, volatility: float) -> Tuple[RegimeKind, int]:
        """
        Determines the regime and its confidence from trend and volatility.

        Bull and bear take precedence; extreme volatility without a qualifying
        trend marks a transition, and everything else is range-bound.

        Args:
            trend: Signed net return of the reference series.
            volatility: Standard deviation of its per-bar returns.

        Returns:
            The regime kind and its confidence (0-100).
        """
        if trend > self.bull_trend_threshold and volatility < self.bull_max_volatility:
            regime = RegimeKind.BULL
        elif trend < self.bear_trend_threshold and volatility > self.bear_min_volatility:
            regime = RegimeKind.BEAR
        elif volatility > self.transition_volatility:
            regime = RegimeKind.TRANSITION
        else:
            regime = RegimeKind.CRAB

        return regime, REGIME_CONFIDENCE[regime]

    def build_regime(self, trend: float, volatility: float) -> MarketRegime:
        """
        Builds the full MarketRegime record for a trend/volatility pair.

        Args:
            trend: Signed net return of the reference series.
            volatility: Standard deviation of its per-bar returns.

        Returns:
            A MarketRegime object.
        """
        regime, confidence = self.classify_regime(trend, volatility)
        return MarketRegime(
            regime=regime,
            confidence=confidence,
            volatility_level=volatility_level(volatility),
            trend_strength=min(abs(trend), 1.0),
            narrative=NARRATIVES[regime],
            risk_level=risk_level(volatility),
            volatility=volatility,
            trend=trend,
        )

    def detect(self, df: pd.DataFrame) -> MarketRegime:
        """
        Detects the market regime from a reference series.

        A series shorter than ``min_bars`` is classified from the neutral
        default statistics instead of raising.

        Args:
            df: A pandas DataFrame with a time series of OHLC data.

        Returns:
            A MarketRegime object with the detected regime and metadata.
        """
        if len(df) < self.min_bars:
            return self.build_regime(self.default_trend, self.default_volatility)

        return self.build_regime(calculate_trend(df), calculate_volatility(df))
