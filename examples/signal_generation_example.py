"""
Example usage of the Market Signal Engine.

This script demonstrates how to produce multi-timeframe signals, the market
regime and per-symbol sentiment from in-memory data, and how to keep the
result cache fresh with the recomputation scheduler.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Dict, Optional

import numpy as np
import pandas as pd

from market_engine.communication.recompute_scheduler import RecomputeScheduler, SchedulerConfig
from market_engine.config.signal_generation import signal_generation_config
from market_engine.data.providers import MarketDataFeed, SentimentReadings, StaticSentimentProvider
from market_engine.signal_generation import MarketAnalysisEngine
from market_engine.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def generate_sample_market_data(days: int = 100, seed: int = 42) -> pd.DataFrame:
    """
    Generate sample market data for demonstration.

    Args:
        days: Number of daily bars to generate
        seed: Random seed for reproducible results

    Returns:
        DataFrame with OHLCV data
    """
    rng = np.random.default_rng(seed)

    dates = pd.date_range(start=datetime.now() - timedelta(days=days), periods=days, freq='D')

    # Trend, noise and a seasonal swing
    base_price = 100.0
    trend = np.linspace(0, 20, days)
    noise = rng.normal(0, 2, days)
    seasonal = 5 * np.sin(np.linspace(0, 4 * np.pi, days))
    close_prices = base_price + trend + noise + seasonal

    high = close_prices + rng.uniform(0, 3, days)
    low = close_prices - rng.uniform(0, 3, days)
    open_prices = low + rng.uniform(0, 1, days) * (high - low)

    return pd.DataFrame({
        'open': open_prices,
        'high': high,
        'low': low,
        'close': close_prices,
        'volume': rng.uniform(1000000, 5000000, days),
    }, index=dates)


class SampleFeed(MarketDataFeed):
    """Feed serving one generated window per symbol."""

    def __init__(self, frames: Dict[str, pd.DataFrame]):
        self.frames = frames

    async def fetch_bars(self, symbol: str) -> Optional[pd.DataFrame]:
        return self.frames.get(symbol)


async def demonstrate_signal_generation():
    """Demonstrate the engine and the scheduler."""
    configure_logging()

    frames = {
        "BTC": generate_sample_market_data(seed=42),
        "ETH": generate_sample_market_data(seed=7),
    }
    provider = StaticSentimentProvider({
        "BTC": SentimentReadings(
            sources={"twitter": 0.35, "reddit": 0.1, "discord": 0.2, "telegram": 0.05},
            fear_greed_index=64,
            social_mentions=18250,
            whale_activity="accumulating",
            institutional_flow="inflow",
            news_sentiment=0.25,
        ),
    })

    engine = MarketAnalysisEngine(
        config=signal_generation_config.to_dict(),
        sentiment_provider=provider,
    )

    signals = engine.generate_signals("BTC", frames["BTC"])
    for signal in signals:
        logger.info(
            "Signal generated",
            symbol=signal.symbol,
            timeframe=signal.timeframe,
            signal=signal.kind.value,
            confidence=signal.confidence,
            entry=round(signal.entry_price, 2),
            target=round(signal.target_price, 2),
            stop=round(signal.stop_loss, 2),
            risk_reward=round(signal.risk_reward_ratio, 2),
            reasoning=list(signal.reasoning),
        )

    regime = engine.detect_market_regime(frames)
    logger.info("Market regime", **regime.to_dict())

    sentiment = await engine.analyze_sentiment("BTC")
    logger.info("Sentiment", **sentiment.to_dict())

    scheduler = RecomputeScheduler(engine, SampleFeed(frames), SchedulerConfig(min_refresh_seconds=0.0))
    for symbol in frames:
        scheduler.add_symbol(symbol)

    results = await scheduler.run_cycle()
    logger.info("Recomputation cycle finished", results=results, **engine.get_performance_metrics())

    cached = engine.get_cached_analysis("ETH")
    if cached and cached.consensus:
        logger.info("Cached consensus", symbol="ETH", signal=cached.consensus.kind.value)


if __name__ == "__main__":
    asyncio.run(demonstrate_signal_generation())
