"""
Components for the signal generation pipeline.

This module contains the individual components that the MarketAnalysisEngine
combines: per-timeframe signal generation, price targets, multi-timeframe
consensus, market regime detection and sentiment aggregation.
"""

from .price_targets import PriceTargetCalculator
from .timeframe_signal_generator import TimeframeSignalGenerator
from .consensus_signal_combiner import ConsensusSignalCombiner
from .market_regime_detector import MarketRegimeDetector
from .sentiment_aggregator import SentimentAggregator

__all__ = [
    "PriceTargetCalculator",
    "TimeframeSignalGenerator",
    "ConsensusSignalCombiner",
    "MarketRegimeDetector",
    "SentimentAggregator",
]
