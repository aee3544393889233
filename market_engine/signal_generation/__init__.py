"""
Signal Generation Pipeline.

This module turns OHLCV windows into trading signals: it computes technical
indicators, emits one signal per timeframe with a confidence score and
ATR-derived price targets, reduces the timeframes into a consensus call,
classifies the global market regime and aggregates multi-source sentiment.

Every computation is a pure function of the window it is given. The only
shared state is the per-symbol result cache written by the engine.
"""

from .core import (
    CONSENSUS_TIMEFRAME,
    DEFAULT_TIMEFRAMES,
    IndicatorSnapshot,
    InstitutionalFlow,
    MacdReading,
    MarketRegime,
    PriceBar,
    RegimeKind,
    RiskLevel,
    SentimentAnalysis,
    Signal,
    SignalKind,
    SupportResistance,
    SymbolAnalysis,
    VolatilityLevel,
    VolumeProfile,
    WhaleActivity,
    bars_to_frame,
)

from .signal_generator import MarketAnalysisEngine

from .components import (
    PriceTargetCalculator,
    TimeframeSignalGenerator,
    ConsensusSignalCombiner,
    MarketRegimeDetector,
    SentimentAggregator,
)

__all__ = [
    # Records
    "CONSENSUS_TIMEFRAME",
    "DEFAULT_TIMEFRAMES",
    "IndicatorSnapshot",
    "InstitutionalFlow",
    "MacdReading",
    "MarketRegime",
    "PriceBar",
    "RegimeKind",
    "RiskLevel",
    "SentimentAnalysis",
    "Signal",
    "SignalKind",
    "SupportResistance",
    "SymbolAnalysis",
    "VolatilityLevel",
    "VolumeProfile",
    "WhaleActivity",
    "bars_to_frame",
    # Engine
    "MarketAnalysisEngine",
    # Component classes
    "PriceTargetCalculator",
    "TimeframeSignalGenerator",
    "ConsensusSignalCombiner",
    "MarketRegimeDetector",
    "SentimentAggregator",
]
