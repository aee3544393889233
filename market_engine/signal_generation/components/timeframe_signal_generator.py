"""
Per-timeframe signal generation component.

This component combines RSI, the simplified MACD, the volume profile and
support/resistance into one directional call for a single timeframe, with
an additive confidence score and ATR-derived price targets.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

from ..core import IndicatorSnapshot, Signal, SignalKind, VolumeProfile
from ..indicators import (
    VolumeSeries,
    calculate_atr,
    calculate_macd,
    calculate_rsi,
    classify_volume_profile,
    find_support_resistance,
)
from .price_targets import PriceTargetCalculator

logger = logging.getLogger(__name__)

PatternDetector = Callable[[pd.DataFrame], List[str]]


class TimeframeSignalGenerator:
    """
    Generates a signal for one symbol on one timeframe.

    Confidence starts at the base value and only ever increases through the
    RSI, MACD and volume adjustments before being capped, so every signal
    lands between the base and the cap.
    """

    def __init__(self, config: Dict, pattern_detector: Optional[PatternDetector] = None):
        """
        Initialize the timeframe signal generator.

        Args:
            config: Configuration dictionary with "timeframe_signal",
                "indicators" and "price_targets" sections
            pattern_detector: Optional callable returning pattern names for a window
        """
        self.config = config
        signal_config = config.get("timeframe_signal", {})
        indicator_config = config.get("indicators", {})

        self.min_bars = signal_config.get("min_bars", 50)
        self.oversold_threshold = signal_config.get("oversold_threshold", 30.0)
        self.overbought_threshold = signal_config.get("overbought_threshold", 70.0)
        self.base_confidence = signal_config.get("base_confidence", 50)
        self.rsi_confidence_boost = signal_config.get("rsi_confidence_boost", 15)
        self.macd_confidence_boost = signal_config.get("macd_confidence_boost", 10)
        self.volume_confidence_boost = signal_config.get("volume_confidence_boost", 12)
        self.max_confidence = signal_config.get("max_confidence", 95)

        self.rsi_period = indicator_config.get("rsi_period", 14)
        self.support_resistance_window = indicator_config.get("support_resistance_window", 50)
        self.atr_period = indicator_config.get("atr_period", 14)

        self.price_targets = PriceTargetCalculator(config.get("price_targets", {}))
        self.pattern_detector = pattern_detector

    def calculate_indicators(self, df: pd.DataFrame, volume: VolumeSeries) -> IndicatorSnapshot:
        """
        Calculate the indicator snapshot for a window.

        Args:
            df: DataFrame with OHLCV data
            volume: Volume samples parallel to the bars

        Returns:
            IndicatorSnapshot: RSI, MACD reading, volume profile and levels
        """
        return IndicatorSnapshot(
            rsi=calculate_rsi(df, self.rsi_period),
            macd=calculate_macd(df),
            volume_profile=classify_volume_profile(volume),
            support_resistance=find_support_resistance(df, self.support_resistance_window),
        )

    def generate(
        self,
        symbol: str,
        df: pd.DataFrame,
        volume: Optional[VolumeSeries] = None,
        timeframe: str = "1h",
    ) -> Optional[Signal]:
        """
        Generate a signal for one timeframe.

        Args:
            symbol: Trading symbol
            df: DataFrame with OHLCV data, oldest bar first
            volume: Volume samples; defaults to the frame's volume column
            timeframe: Timeframe label recorded on the signal

        Returns:
            Optional[Signal]: The signal, or None when the window is shorter
            than min_bars
        """
        if len(df) < self.min_bars:
            logger.debug(
                f"Skipping {symbol} {timeframe}: {len(df)} bars, need {self.min_bars}"
            )
            return None

        if volume is None:
            volume = df["volume"]

        entry_price = float(df["close"].iloc[-1])
        indicators = self.calculate_indicators(df, volume)

        kind, confidence, reasoning = self.score_indicators(indicators)

        target_price, stop_loss = self.price_targets.calculate(
            kind, entry_price, calculate_atr(df, self.atr_period)
        )
        patterns = self.pattern_detector(df) if self.pattern_detector else []

        return Signal(
            symbol=symbol,
            kind=kind,
            confidence=min(confidence, self.max_confidence),
            timeframe=timeframe,
            entry_price=entry_price,
            target_price=target_price,
            stop_loss=stop_loss,
            indicators=indicators,
            reasoning=reasoning,
            patterns=patterns,
        )

    def score_indicators(self, indicators: IndicatorSnapshot) -> Tuple[SignalKind, int, List[str]]:
        """Apply the RSI, MACD and volume rules in order."""
        kind = SignalKind.HOLD
        confidence = self.base_confidence
        reasoning: List[str] = []

        rsi = indicators.rsi
        if rsi < self.oversold_threshold:
            reasoning.append(f"RSI oversold at {rsi:.1f}")
            confidence += self.rsi_confidence_boost
            kind = SignalKind.BUY
        elif rsi > self.overbought_threshold:
            reasoning.append(f"RSI overbought at {rsi:.1f}")
            confidence += self.rsi_confidence_boost
            kind = SignalKind.SELL

        macd = indicators.macd
        if macd.direction > 0 and macd.histogram > 0:
            reasoning.append("MACD bullish convergence")
            confidence += self.macd_confidence_boost
            if kind != SignalKind.SELL:
                kind = SignalKind.STRONG_BUY if kind == SignalKind.BUY else SignalKind.BUY
        elif macd.direction < 0 and macd.histogram > 0:
            reasoning.append("MACD bearish divergence")
            confidence += self.macd_confidence_boost
            if kind != SignalKind.BUY:
                kind = SignalKind.STRONG_SELL if kind == SignalKind.SELL else SignalKind.SELL

        if indicators.volume_profile == VolumeProfile.ACCUMULATION:
            reasoning.append("Volume shows accumulation pattern")
            confidence += self.volume_confidence_boost
        elif indicators.volume_profile == VolumeProfile.DISTRIBUTION:
            reasoning.append("Volume shows distribution pattern")
            confidence += self.volume_confidence_boost

        return kind, confidence, reasoning
