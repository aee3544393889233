"""
Pytest configuration and shared fixtures for the Market Signal Engine test suite.

This module provides common fixtures and configuration for all test categories,
ensuring consistent test data and setup across the entire test suite.
"""

from typing import Optional, Sequence

import numpy as np
import pandas as pd
import pytest

from market_engine.config.signal_generation import SignalGenerationConfig
from market_engine.data.providers import SentimentReadings, StaticSentimentProvider
from market_engine.signal_generation import MarketAnalysisEngine
from market_engine.signal_generation.core import (
    IndicatorSnapshot,
    MacdReading,
    Signal,
    SignalKind,
    SupportResistance,
    VolumeProfile,
)


# ==============================
# Pytest Configuration
# ==============================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests for component interactions"
    )


# ==============================
# Helpers
# ==============================

def make_frame(
    closes: Sequence[float],
    volumes: Optional[Sequence[float]] = None,
    spread: float = 0.01,
) -> pd.DataFrame:
    """Build an OHLCV frame whose highs and lows sit a fixed fraction around the close."""
    closes = np.asarray(closes, dtype=float)
    if volumes is None:
        volumes = np.full(len(closes), 1000.0)

    return pd.DataFrame({
        'open': closes,
        'high': closes * (1 + spread),
        'low': closes * (1 - spread),
        'close': closes,
        'volume': np.asarray(volumes, dtype=float),
    }, index=pd.date_range(start='2024-01-01', periods=len(closes), freq='h'))


def make_signal(
    kind: SignalKind,
    confidence: int = 60,
    entry: float = 100.0,
    target: float = 110.0,
    stop: float = 95.0,
    timeframe: str = "1h",
    patterns: Sequence[str] = (),
    symbol: str = "BTC",
) -> Signal:
    """Build a signal with a fixed indicator snapshot."""
    return Signal(
        symbol=symbol,
        kind=kind,
        confidence=confidence,
        timeframe=timeframe,
        entry_price=entry,
        target_price=target,
        stop_loss=stop,
        indicators=IndicatorSnapshot(
            rsi=50.0,
            macd=MacdReading(1, 0.5),
            volume_profile=VolumeProfile.NEUTRAL,
            support_resistance=SupportResistance(90.0, 120.0),
        ),
        reasoning=["test"],
        patterns=patterns,
    )


# ==============================
# Market Data Fixtures
# ==============================

@pytest.fixture
def uptrend_data() -> pd.DataFrame:
    """60 bars rising by 1 per bar from 100."""
    return make_frame([100.0 + i for i in range(60)])


@pytest.fixture
def downtrend_data() -> pd.DataFrame:
    """60 bars falling by 1 per bar from 200."""
    return make_frame([200.0 - i for i in range(60)])


@pytest.fixture
def sample_ohlc_data() -> pd.DataFrame:
    """Create sample OHLCV data for testing."""
    np.random.seed(42)  # For reproducible tests

    dates = pd.date_range(start='2023-01-01', periods=100, freq='D')

    # Create a trending price series
    base_price = 100
    trend = np.linspace(0, 20, 100)  # Upward trend
    noise = np.random.normal(0, 2, 100)  # Random noise
    close_prices = base_price + trend + noise

    # Generate OHLC data
    high = close_prices + np.random.uniform(0, 2, 100)
    low = close_prices - np.random.uniform(0, 2, 100)
    open_prices = low + np.random.uniform(0, high - low)
    volume = np.random.uniform(1000000, 5000000, 100)

    return pd.DataFrame({
        'open': open_prices,
        'high': high,
        'low': low,
        'close': close_prices,
        'volume': volume
    }, index=dates)


# ==============================
# Engine Fixtures
# ==============================

@pytest.fixture
def engine_config() -> dict:
    """Default component configuration as a plain dictionary."""
    return SignalGenerationConfig().to_dict()


@pytest.fixture
def sentiment_provider() -> StaticSentimentProvider:
    """Provider with fixed readings for BTC."""
    return StaticSentimentProvider({
        "BTC": SentimentReadings(
            sources={"twitter": 0.4, "reddit": 0.2, "discord": -0.2, "telegram": 0.6},
            fear_greed_index=72,
            social_mentions=4200,
            whale_activity="accumulating",
            institutional_flow="inflow",
            news_sentiment=0.3,
        ),
    })


@pytest.fixture
def engine(engine_config, sentiment_provider) -> MarketAnalysisEngine:
    """Engine wired to the static sentiment provider."""
    return MarketAnalysisEngine(config=engine_config, sentiment_provider=sentiment_provider)
