"""
Market Regime Detector component.

This component selects the reference series from the caller's market data,
runs the regime classifier over it and keeps a bounded history of the
regimes it has reported.
"""

import logging
from typing import Dict, List, Mapping, Optional, Union

import pandas as pd

from ..core import MarketRegime, OHLCV_COLUMNS, RegimeKind
from ...analysis.market_regime import RegimeDetector

logger = logging.getLogger(__name__)

MarketData = Union[pd.DataFrame, Mapping[str, pd.DataFrame]]


class MarketRegimeDetector:
    """
    Detects the global market regime from a reference series.

    This component wraps the RegimeDetector and tracks how long the current
    regime has persisted across detections.
    """

    def __init__(self, config: Dict):
        """
        Initialize the market regime detector.

        Args:
            config: Configuration dictionary with detector parameters
        """
        self.config = config
        self.reference_symbol = config.get("reference_symbol", "BTC")
        self.history_size = config.get("history_size", 200)
        self._detector = RegimeDetector(config)
        self._regime_history: List[MarketRegime] = []

    def select_reference(self, market_data: MarketData, reference_symbol: Optional[str] = None) -> pd.DataFrame:
        """
        Pick the reference series out of the supplied market data.

        Args:
            market_data: A single frame, or frames keyed by symbol
            reference_symbol: Symbol to use instead of the configured one

        Returns:
            pd.DataFrame: The reference frame, empty when it is missing
        """
        if isinstance(market_data, pd.DataFrame):
            return market_data

        symbol = reference_symbol or self.reference_symbol
        frame = market_data.get(symbol)
        if frame is None:
            logger.debug(f"Reference symbol {symbol} missing, using neutral regime")
            return pd.DataFrame(columns=OHLCV_COLUMNS)
        return frame

    def detect_regime(self, market_data: MarketData, reference_symbol: Optional[str] = None) -> MarketRegime:
        """
        Detect the current market regime.

        Args:
            market_data: A single frame, or frames keyed by symbol
            reference_symbol: Symbol to classify instead of the configured one

        Returns:
            MarketRegime: Detected market regime
        """
        regime = self._detector.detect(self.select_reference(market_data, reference_symbol))

        self._regime_history.append(regime)
        # Keep history size manageable
        if len(self._regime_history) > self.history_size:
            self._regime_history.pop(0)

        logger.debug(
            f"Market regime {regime.regime.value} "
            f"(volatility={regime.volatility:.4f}, trend={regime.trend:.4f})"
        )
        return regime

    def get_current_regime(self) -> Optional[MarketRegime]:
        """
        Get the most recently detected regime.

        Returns:
            MarketRegime: Current regime or None if no detection has occurred
        """
        return self._regime_history[-1] if self._regime_history else None

    def get_regime_history(self) -> List[MarketRegime]:
        """
        Get the history of detected regimes.

        Returns:
            List[MarketRegime]: History of regimes, oldest first
        """
        return self._regime_history.copy()

    def is_regime_stable(self, periods: int = 3) -> bool:
        """
        Check if the current regime has been stable for a given number of periods.

        Args:
            periods: Number of periods to check for stability

        Returns:
            bool: True if regime is stable, False otherwise
        """
        if len(self._regime_history) < periods:
            return False

        recent = self._regime_history[-periods:]
        return all(r.regime == recent[0].regime for r in recent)

    def get_regime_duration(self) -> int:
        """
        Get the duration of the current regime in periods.

        Returns:
            int: Number of consecutive detections of the current regime
        """
        if not self._regime_history:
            return 0

        current: RegimeKind = self._regime_history[-1].regime
        duration = 0

        # Count backwards from the most recent regime
        for regime in reversed(self._regime_history):
            if regime.regime == current:
                duration += 1
            else:
                break

        return duration
