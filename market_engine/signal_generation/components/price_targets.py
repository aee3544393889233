"""
Price target calculation for generated signals.

Targets and stops are offsets from the entry price sized by recent average
true range and clamped into fixed bands, so every call is deterministic for
a given window.
"""

from typing import Dict, Tuple

from ..core import SignalKind


class PriceTargetCalculator:
    """Derives target price and stop-loss from entry price and ATR."""

    def __init__(self, config: Dict):
        """
        Initialize the calculator.

        Args:
            config: Configuration dictionary with ATR multiples and offset bands
        """
        self.config = config
        self.target_atr_multiple = config.get("target_atr_multiple", 3.0)
        self.stop_atr_multiple = config.get("stop_atr_multiple", 1.5)
        self.min_target_offset = config.get("min_target_offset", 0.03)
        self.max_target_offset = config.get("max_target_offset", 0.08)
        self.min_stop_offset = config.get("min_stop_offset", 0.02)
        self.max_stop_offset = config.get("max_stop_offset", 0.04)

    @staticmethod
    def _clamp(value: float, low: float, high: float) -> float:
        return max(low, min(high, value))

    def offsets(self, entry_price: float, atr: float) -> Tuple[float, float]:
        """
        Compute the target and stop offsets as fractions of the entry price.

        Args:
            entry_price: Current close
            atr: Average true range over the recent window

        Returns:
            Tuple[float, float]: (target offset, stop offset), both positive
        """
        relative_atr = atr / entry_price if entry_price > 0 else 0.0
        target_offset = self._clamp(
            self.target_atr_multiple * relative_atr, self.min_target_offset, self.max_target_offset
        )
        stop_offset = self._clamp(
            self.stop_atr_multiple * relative_atr, self.min_stop_offset, self.max_stop_offset
        )
        return target_offset, stop_offset

    def calculate(self, kind: SignalKind, entry_price: float, atr: float) -> Tuple[float, float]:
        """
        Place target and stop on the side matching the call.

        Buy calls target above the entry with the stop below it; sell calls
        and HOLD target below with the stop above.

        Args:
            kind: Signal kind the prices are for
            entry_price: Current close
            atr: Average true range over the recent window

        Returns:
            Tuple[float, float]: (target price, stop-loss price)
        """
        target_offset, stop_offset = self.offsets(entry_price, atr)

        if kind.is_buy:
            return entry_price * (1 + target_offset), entry_price * (1 - stop_offset)
        return entry_price * (1 - target_offset), entry_price * (1 + stop_offset)
