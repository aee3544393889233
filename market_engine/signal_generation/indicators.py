"""
Indicator library for the Market Signal Engine.

Stateless numeric functions over the trailing window of an OHLCV DataFrame.
Every function degrades to a neutral value when the window is too short
instead of raising, so callers can keep going with partial data.
"""

from typing import Sequence, Union

import numpy as np
import pandas as pd

from .core import MacdReading, SupportResistance, VolumeProfile


NEUTRAL_RSI = 50.0
MACD_FAST_PERIOD = 12
MACD_SLOW_PERIOD = 26
VOLUME_SHORT_WINDOW = 5
VOLUME_LONG_WINDOW = 20
VOLUME_MIN_SAMPLES = 10
ACCUMULATION_RATIO = 1.2
DISTRIBUTION_RATIO = 0.8

VolumeSeries = Union[pd.Series, Sequence[float], np.ndarray]


def calculate_rsi(df: pd.DataFrame, period: int = 14) -> float:
    """
    Calculate the Relative Strength Index over the trailing window.

    Gains and losses are summed over the last ``period`` close-to-close
    changes and averaged over ``period``. A window without losses never
    divides: it is 100 when it gained and 0 when it was flat, since a flat
    window has no gain to put over the floored loss.

    Args:
        df: DataFrame with a close column
        period: Number of changes to average

    Returns:
        float: RSI in [0, 100], or 50.0 with fewer than period + 1 bars
    """
    closes = df["close"].to_numpy(dtype=float)
    if len(closes) < period + 1:
        return NEUTRAL_RSI

    changes = np.diff(closes[-(period + 1):])
    avg_gain = changes[changes > 0].sum() / period
    avg_loss = -changes[changes < 0].sum() / period

    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else 0.0

    rs = avg_gain / avg_loss
    return float(100.0 - 100.0 / (1.0 + rs))


def calculate_ema(values: VolumeSeries, period: int) -> float:
    """
    Exponential moving average seeded with the first value of the window.

    Args:
        values: Values in chronological order
        period: Smoothing period, multiplier is 2 / (period + 1)

    Returns:
        float: EMA at the last value
    """
    series = pd.Series(values, dtype=float)
    if series.empty:
        return 0.0
    return float(series.ewm(span=period, adjust=False).mean().iloc[-1])


def calculate_macd(df: pd.DataFrame) -> MacdReading:
    """
    Simplified MACD: EMA12 over the last 12 closes against EMA26 over the last 26.

    Args:
        df: DataFrame with a close column

    Returns:
        MacdReading: +1/-1 direction and absolute difference, or a zero
        reading with fewer than 26 bars
    """
    closes = df["close"].to_numpy(dtype=float)[-MACD_SLOW_PERIOD:]
    if len(closes) < MACD_SLOW_PERIOD:
        return MacdReading()

    ema_fast = calculate_ema(closes[-MACD_FAST_PERIOD:], MACD_FAST_PERIOD)
    ema_slow = calculate_ema(closes, MACD_SLOW_PERIOD)
    macd_line = ema_fast - ema_slow

    return MacdReading(direction=1 if macd_line > 0 else -1, histogram=abs(macd_line))


def volume_ratio(volumes: VolumeSeries) -> float:
    """
    Mean of the last 5 volumes over the mean of the last 20.

    Both means divide by the samples actually present: a series shorter than
    20 is averaged over its own length instead of being divided by a fixed 20.
    """
    values = np.asarray(volumes, dtype=float)
    long_avg = values[-VOLUME_LONG_WINDOW:].mean() if len(values) else 0.0
    if long_avg == 0:
        return 1.0
    return float(values[-VOLUME_SHORT_WINDOW:].mean() / long_avg)


def classify_volume_profile(volumes: VolumeSeries) -> VolumeProfile:
    """
    Classify recent volume as accumulation, distribution or neutral.

    Args:
        volumes: Volume samples in chronological order

    Returns:
        VolumeProfile: ACCUMULATION when the ratio is strictly above 1.2,
        DISTRIBUTION when strictly below 0.8, otherwise NEUTRAL
    """
    if len(volumes) < VOLUME_MIN_SAMPLES:
        return VolumeProfile.NEUTRAL

    ratio = volume_ratio(volumes)
    if ratio > ACCUMULATION_RATIO:
        return VolumeProfile.ACCUMULATION
    if ratio < DISTRIBUTION_RATIO:
        return VolumeProfile.DISTRIBUTION
    return VolumeProfile.NEUTRAL


def find_support_resistance(df: pd.DataFrame, window: int = 50) -> SupportResistance:
    """
    Support is the lowest low and resistance the highest high of the window.

    Args:
        df: DataFrame with high and low columns
        window: Number of trailing bars to consider

    Returns:
        SupportResistance: Levels over the trailing window
    """
    recent = df.iloc[-window:]
    return SupportResistance(
        support=float(recent["low"].min()),
        resistance=float(recent["high"].max()),
    )


def calculate_atr(df: pd.DataFrame, period: int = 14) -> float:
    """Simple average of the true range over the trailing period."""
    if len(df) < 2:
        return 0.0

    high = df["high"].astype(float)
    low = df["low"].astype(float)
    prev_close = df["close"].astype(float).shift(1)

    true_range = pd.concat(
        [high - low, (high - prev_close).abs(), (low - prev_close).abs()],
        axis=1,
    ).max(axis=1).iloc[1:]

    return float(true_range.iloc[-period:].mean())
