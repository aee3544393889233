"""
Scheduled recomputation loop for the Market Signal Engine.

This module drives the engine on a fixed interval: each cycle fetches the
latest window for every registered symbol and republishes its analysis.
A symbol whose computation fails or runs past the cycle timeout is skipped
for that cycle and keeps its previous cached analysis.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from market_engine.config.settings import settings
from market_engine.data.providers.base_provider import MarketDataFeed
from market_engine.signal_generation.signal_generator import MarketAnalysisEngine
from market_engine.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SchedulerConfig:
    """Configuration for the recomputation scheduler."""
    interval_seconds: float = settings.scheduler.INTERVAL_SECONDS
    cycle_timeout_seconds: float = settings.scheduler.CYCLE_TIMEOUT_SECONDS
    min_refresh_seconds: float = settings.scheduler.MIN_REFRESH_SECONDS


class RecomputeScheduler:
    """
    Periodically recomputes signals and sentiment for a set of symbols.

    Each symbol is owned by exactly one task per cycle, which is the only
    writer of its cache entry while it runs.
    """

    def __init__(
        self,
        engine: MarketAnalysisEngine,
        feed: MarketDataFeed,
        config: Optional[SchedulerConfig] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            engine: Engine whose cache receives the results
            feed: Source of OHLCV windows
            config: Scheduler configuration
        """
        self.engine = engine
        self.feed = feed
        self.config = config or SchedulerConfig()

        self.symbols: Set[str] = set()
        self.loop_task: Optional[asyncio.Task] = None
        self.is_running = False
        self._stop_event = asyncio.Event()
        self._last_cycle_at: Optional[float] = None

        # Statistics
        self.stats = {
            'cycles': 0,
            'skipped_cycles': 0,
            'successful_updates': 0,
            'failed_updates': 0,
            'timed_out_updates': 0,
            'last_cycle_time': None,
        }

        logger.info("Recompute scheduler initialized")

    def add_symbol(self, symbol: str):
        """Add a symbol to the recomputation set."""
        self.symbols.add(symbol)
        logger.info("Added symbol to recomputation", symbol=symbol)

    def remove_symbol(self, symbol: str):
        """Remove a symbol from the recomputation set."""
        if symbol in self.symbols:
            self.symbols.discard(symbol)
            logger.info("Removed symbol from recomputation", symbol=symbol)

    async def _recompute_symbol(self, symbol: str) -> bool:
        """Fetch and analyze one symbol; False when nothing was published."""
        try:
            published = await asyncio.wait_for(
                self._fetch_and_analyze(symbol), timeout=self.config.cycle_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Recomputation timed out, keeping previous analysis",
                symbol=symbol,
                timeout_seconds=self.config.cycle_timeout_seconds,
            )
            self.stats['timed_out_updates'] += 1
            return False
        except Exception as e:
            logger.error("Error recomputing symbol", symbol=symbol, error=str(e))
            self.stats['failed_updates'] += 1
            return False

        if not published:
            self.stats['failed_updates'] += 1
            return False

        self.stats['successful_updates'] += 1
        return True

    async def _fetch_and_analyze(self, symbol: str) -> bool:
        bars = await self.feed.fetch_bars(symbol)
        if bars is None or bars.empty:
            logger.warning("No bars available, keeping previous analysis", symbol=symbol)
            return False

        await self.engine.analyze_symbol(symbol, bars)
        return True

    async def run_cycle(self) -> Dict[str, bool]:
        """
        Run one recomputation cycle over all registered symbols.

        Returns:
            Dict[str, bool]: Whether a new analysis was published, per symbol;
            empty when the cycle was skipped for arriving too soon
        """
        loop = asyncio.get_running_loop()
        now = loop.time()
        if self._last_cycle_at is not None and now - self._last_cycle_at < self.config.min_refresh_seconds:
            logger.debug("Skipping recomputation cycle requested too soon after the previous one")
            self.stats['skipped_cycles'] += 1
            return {}
        self._last_cycle_at = now

        symbols: List[str] = sorted(self.symbols)
        results = await asyncio.gather(*(self._recompute_symbol(symbol) for symbol in symbols))

        self.stats['cycles'] += 1
        self.stats['last_cycle_time'] = datetime.now()
        return dict(zip(symbols, results))

    async def run_loop(self):
        """Main loop that recomputes all symbols every interval."""
        logger.info("Starting recomputation loop")

        while self.is_running:
            try:
                await self.run_cycle()
            except Exception as e:
                logger.error("Error in recomputation loop", error=str(e))

            # Wake early when stop() is requested
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.config.interval_seconds)
            except asyncio.TimeoutError:
                pass

    async def start(self):
        """Start scheduling recomputation."""
        if self.is_running:
            logger.warning("Scheduler is already running")
            return

        self.is_running = True
        self._stop_event = asyncio.Event()
        self.loop_task = asyncio.create_task(self.run_loop())
        logger.info("Recompute scheduler started")

    async def stop(self):
        """
        Stop scheduling further recomputation.

        A cycle already in flight is allowed to finish; it is bounded by the
        per-symbol timeout.
        """
        if not self.is_running:
            return

        self.is_running = False
        self._stop_event.set()

        if self.loop_task:
            await self.loop_task
            self.loop_task = None

        logger.info("Recompute scheduler stopped")

    def get_statistics(self) -> Dict[str, Any]:
        """Get scheduler statistics."""
        stats = self.stats.copy()
        stats['is_running'] = self.is_running
        stats['total_symbols'] = len(self.symbols)

        attempts = stats['successful_updates'] + stats['failed_updates'] + stats['timed_out_updates']
        stats['success_rate'] = stats['successful_updates'] / attempts if attempts else 0.0

        return stats
