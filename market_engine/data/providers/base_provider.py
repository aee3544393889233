"""
Abstract provider interfaces for the Market Signal Engine.

The engine never fetches data itself. Callers plug in a market data feed
for bars and a sentiment provider for per-source scores and the related
gauges; implementations own transport, credentials and retries.
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional

import pandas as pd


class MarketDataFeed(ABC):
    """
    Abstract source of OHLCV bars.

    Implementations must return frames with open, high, low, close and volume
    columns in ascending timestamp order, validated before they reach the
    engine.
    """

    @abstractmethod
    async def fetch_bars(self, symbol: str) -> Optional[pd.DataFrame]:
        """
        Fetches the current analysis window for a symbol.

        Args:
            symbol: The symbol to fetch bars for.

        Returns:
            A pandas DataFrame containing the OHLCV data, or None if fetching fails.
        """
        pass


class SentimentProvider(ABC):
    """
    Abstract source of sentiment inputs for a symbol.

    Every method may return None when the value is unavailable; the
    aggregator substitutes a neutral value and normalises whatever is
    returned into its documented range.
    """

    @abstractmethod
    async def fetch_source_sentiment(self, symbol: str) -> Dict[str, float]:
        """
        Fetches one sentiment score per source.

        Args:
            symbol: The symbol to score.

        Returns:
            Scores keyed by source name, nominally in [-1, 1].
        """
        pass

    @abstractmethod
    async def fetch_fear_greed_index(self, symbol: str) -> Optional[float]:
        """Fear/greed gauge, nominally 0 (extreme fear) to 100 (extreme greed)."""
        pass

    @abstractmethod
    async def fetch_social_mentions(self, symbol: str) -> Optional[int]:
        """Number of social mentions over the provider's window."""
        pass

    @abstractmethod
    async def fetch_whale_activity(self, symbol: str) -> Optional[str]:
        """One of "accumulating", "distributing" or "neutral"."""
        pass

    @abstractmethod
    async def fetch_institutional_flow(self, symbol: str) -> Optional[str]:
        """One of "inflow", "outflow" or "neutral"."""
        pass

    @abstractmethod
    async def fetch_news_sentiment(self, symbol: str) -> Optional[float]:
        """Aggregate news sentiment, nominally in [-1, 1]."""
        pass
