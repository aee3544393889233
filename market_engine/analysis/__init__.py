"""
Market-wide analysis shared by the signal generation pipeline.
"""

from .market_regime import MarketRegime, RegimeDetector, RegimeKind, RiskLevel, VolatilityLevel

__all__ = [
    "MarketRegime",
    "RegimeDetector",
    "RegimeKind",
    "RiskLevel",
    "VolatilityLevel",
]
