"""
Market Analysis Engine.

This class orchestrates the components of the signal generation pipeline:
per-timeframe signals and their consensus, the global market regime and
per-symbol sentiment. The engine is an explicit value built once by the
caller and passed to whatever drives it; there is no shared module-level
instance.
"""

import asyncio
import functools
import logging
import threading
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from ..communication.state_manager import AnalysisStateManager
from ..config.settings import settings
from ..config.signal_generation import signal_generation_config
from ..data.providers.base_provider import SentimentProvider
from .components import (
    ConsensusSignalCombiner,
    MarketRegimeDetector,
    SentimentAggregator,
    TimeframeSignalGenerator,
)
from .components.market_regime_detector import MarketData
from .components.timeframe_signal_generator import PatternDetector
from .core import DEFAULT_TIMEFRAMES, MarketRegime, SentimentAnalysis, Signal, SymbolAnalysis
from .indicators import VolumeSeries

logger = logging.getLogger(__name__)

BarInput = Union[pd.DataFrame, Mapping[str, pd.DataFrame]]


class MarketAnalysisEngine:
    """
    Main engine that orchestrates all components.

    Computations are pure over the supplied windows. The only state the
    engine writes is the per-symbol result cache (through analyze_symbol)
    and the regime detector's history.
    """

    def __init__(
        self,
        config: Optional[Dict] = None,
        sentiment_provider: Optional[SentimentProvider] = None,
        cache: Optional[AnalysisStateManager] = None,
        pattern_detector: Optional[PatternDetector] = None,
    ):
        """
        Initialize the analysis engine.

        Args:
            config: Configuration dictionary with all parameters; defaults to
                signal_generation_config.to_dict()
            sentiment_provider: Source of sentiment inputs
            cache: Result cache; a private one sized by CACHE_MAX_ENTRIES is
                created when omitted
            pattern_detector: Optional pattern detector for timeframe signals
        """
        self.config = config if config is not None else signal_generation_config.to_dict()

        self.timeframes: List[str] = list(
            self.config.get("timeframe_signal", {}).get("timeframes", DEFAULT_TIMEFRAMES)
        )

        # Initialize components
        self.timeframe_generator = TimeframeSignalGenerator(self.config, pattern_detector)
        self.consensus_combiner = ConsensusSignalCombiner(self.config.get("consensus_combiner", {}))
        self.market_regime_detector = MarketRegimeDetector(self.config.get("market_regime", {}))
        self.sentiment_aggregator = SentimentAggregator(sentiment_provider, self.config.get("sentiment", {}))

        self.cache = cache if cache is not None else AnalysisStateManager(settings.cache.MAX_ENTRIES)

        # Performance tracking; signal runs may execute on worker threads
        self._metrics_lock = threading.Lock()
        self.performance_metrics = {
            "total_signal_runs": 0,
            "total_signals_generated": 0,
            "total_consensus_signals": 0,
            "avg_generation_time": 0.0,
        }

    def generate_signals(
        self,
        symbol: str,
        bars: BarInput,
        volume: Optional[VolumeSeries] = None,
        timeframes: Optional[Iterable[str]] = None,
        record_metrics: bool = True,
    ) -> List[Signal]:
        """
        Generate per-timeframe signals and their consensus for a symbol.

        Args:
            symbol: Trading symbol
            bars: One OHLCV frame shared by every timeframe, or frames keyed
                by timeframe label
            volume: Volume samples; defaults to each frame's volume column
            timeframes: Timeframes to analyse; defaults to the configured list
            record_metrics: Count this run in the performance metrics

        Returns:
            List[Signal]: Consensus signal first when one is emitted, then one
            signal per timeframe with enough data
        """
        start_time = time.time()
        timeframes = list(timeframes) if timeframes is not None else self.timeframes

        signals: List[Signal] = []
        for timeframe in timeframes:
            frame = self._frame_for(bars, timeframe)
            if frame is None:
                logger.debug(f"No bars supplied for {symbol} {timeframe}")
                continue

            signal = self.timeframe_generator.generate(symbol, frame, volume, timeframe)
            if signal is not None:
                signals.append(signal)

        consensus = self.consensus_combiner.combine_signals(signals, symbol)
        if consensus is not None:
            signals.insert(0, consensus)

        if record_metrics:
            self._update_performance_metrics(time.time() - start_time, signals, consensus is not None)
        return signals

    @staticmethod
    def _frame_for(bars: BarInput, timeframe: str) -> Optional[pd.DataFrame]:
        if isinstance(bars, pd.DataFrame):
            return bars
        return bars.get(timeframe)

    def detect_market_regime(self, market_data: MarketData, reference_symbol: Optional[str] = None) -> MarketRegime:
        """
        Classify the global market regime.

        Args:
            market_data: Reference frame, or frames keyed by symbol
            reference_symbol: Symbol to classify instead of the configured one

        Returns:
            MarketRegime: Detected regime
        """
        return self.market_regime_detector.detect_regime(market_data, reference_symbol)

    async def analyze_sentiment(self, symbol: str) -> SentimentAnalysis:
        """
        Aggregate multi-source sentiment for a symbol.

        Args:
            symbol: Trading symbol

        Returns:
            SentimentAnalysis: Composite sentiment
        """
        return await self.sentiment_aggregator.analyze(symbol)

    async def analyze_symbol(
        self,
        symbol: str,
        bars: BarInput,
        volume: Optional[VolumeSeries] = None,
    ) -> SymbolAnalysis:
        """
        Compute signals and sentiment for a symbol and publish them to the cache.

        The cache entry is replaced only once both results are ready, so an
        interrupted computation leaves the previous entry untouched.

        Args:
            symbol: Trading symbol
            bars: OHLCV frame, or frames keyed by timeframe
            volume: Volume samples; defaults to each frame's volume column

        Returns:
            SymbolAnalysis: The analysis that was published
        """
        with self.cache.writer(symbol):
            loop = asyncio.get_running_loop()
            start_time = time.time()
            signals_future = loop.run_in_executor(
                None, functools.partial(self.generate_signals, symbol, bars, volume, record_metrics=False)
            )
            signals, sentiment = await asyncio.gather(signals_future, self.analyze_sentiment(symbol))

            analysis = SymbolAnalysis(symbol=symbol, signals=tuple(signals), sentiment=sentiment)
            self.cache.set(symbol, analysis)

        # Only published runs are counted; a cancelled run never gets here
        self._update_performance_metrics(time.time() - start_time, signals, analysis.consensus is not None)

        logger.debug(f"Published analysis for {symbol} with {len(signals)} signals")
        return analysis

    def get_cached_analysis(self, symbol: str) -> Optional[SymbolAnalysis]:
        """Latest published analysis for a symbol, if any."""
        return self.cache.get(symbol)

    def _update_performance_metrics(self, generation_time: float, signals: List[Signal], has_consensus: bool):
        """Update performance metrics."""
        with self._metrics_lock:
            self.performance_metrics["total_signal_runs"] += 1
            self.performance_metrics["total_signals_generated"] += len(signals)
            if has_consensus:
                self.performance_metrics["total_consensus_signals"] += 1

            # Update average generation time
            runs = self.performance_metrics["total_signal_runs"]
            current_avg = self.performance_metrics["avg_generation_time"]
            self.performance_metrics["avg_generation_time"] = (
                (current_avg * (runs - 1) + generation_time) / runs
            )

    def get_performance_metrics(self) -> Dict[str, Any]:
        """Get current performance metrics."""
        with self._metrics_lock:
            metrics = self.performance_metrics.copy()

        if metrics["total_signal_runs"] > 0:
            metrics["consensus_rate"] = metrics["total_consensus_signals"] / metrics["total_signal_runs"]
        else:
            metrics["consensus_rate"] = 0.0

        current_regime = self.market_regime_detector.get_current_regime()
        metrics.update({
            "current_regime": current_regime.regime.value if current_regime else None,
            "regime_duration": self.market_regime_detector.get_regime_duration(),
            "cached_symbols": len(self.cache),
        })

        return metrics

    def reset_metrics(self):
        """Reset performance metrics."""
        with self._metrics_lock:
            self.performance_metrics = {
                "total_signal_runs": 0,
                "total_signals_generated": 0,
                "total_consensus_signals": 0,
                "avg_generation_time": 0.0,
            }
