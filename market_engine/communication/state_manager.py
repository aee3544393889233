"""
Manages the per-symbol analysis results of the Market Signal Engine.

This module provides an AnalysisStateManager that holds the most recent
SymbolAnalysis for each symbol. Entries are immutable values replaced
wholesale, and each symbol has at most one writer at a time, so readers
always observe either the previous or the new analysis.
"""
import logging
import threading
from collections import OrderedDict
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional, Set

if TYPE_CHECKING:
    from market_engine.signal_generation.core import SymbolAnalysis

logger = logging.getLogger(__name__)


class CacheWriteConflictError(RuntimeError):
    """Raised when a second writer claims a symbol that already has one."""


class AnalysisStateManager:
    """
    A bounded, in-memory store of the latest analysis per symbol.

    Only get and set are exposed for the stored values. The store is not
    shared across processes and does not survive a restart.
    """

    def __init__(self, max_entries: int = 500):
        """
        Initializes the AnalysisStateManager.

        Args:
            max_entries: Maximum number of symbols kept; the least recently
                written symbol is evicted first.
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._state: "OrderedDict[str, SymbolAnalysis]" = OrderedDict()
        self._writers: Set[str] = set()
        self._lock = threading.Lock()

    def get(self, symbol: str) -> Optional["SymbolAnalysis"]:
        """
        Retrieves the latest analysis for a symbol.

        Args:
            symbol: The symbol to look up.

        Returns:
            The stored analysis, or None if the symbol has none.
        """
        with self._lock:
            return self._state.get(symbol)

    def set(self, symbol: str, analysis: "SymbolAnalysis"):
        """
        Replaces the stored analysis for a symbol.

        Args:
            symbol: The symbol the analysis belongs to.
            analysis: The new analysis.
        """
        if analysis.symbol != symbol:
            raise ValueError(f"Analysis for {analysis.symbol} cannot be stored under {symbol}")

        with self._lock:
            self._state[symbol] = analysis
            self._state.move_to_end(symbol)
            while len(self._state) > self.max_entries:
                evicted, _ = self._state.popitem(last=False)
                logger.debug(f"Evicted cached analysis for {evicted}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._state)

    @contextmanager
    def writer(self, symbol: str) -> Iterator["AnalysisStateManager"]:
        """
        Claims exclusive write ownership of a symbol for the block.

        Args:
            symbol: The symbol to claim.

        Raises:
            CacheWriteConflictError: If another writer already owns the symbol.
        """
        with self._lock:
            if symbol in self._writers:
                raise CacheWriteConflictError(f"Symbol {symbol} already has an active writer")
            self._writers.add(symbol)
        try:
            yield self
        finally:
            with self._lock:
                self._writers.discard(symbol)

    def has_writer(self, symbol: str) -> bool:
        """Whether a writer currently owns the symbol."""
        with self._lock:
            return symbol in self._writers
