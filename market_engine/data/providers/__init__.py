"""
Provider boundaries for market data and sentiment inputs.
"""

from .base_provider import MarketDataFeed, SentimentProvider
from .static_sentiment_provider import SentimentReadings, StaticSentimentProvider

__all__ = [
    "MarketDataFeed",
    "SentimentProvider",
    "SentimentReadings",
    "StaticSentimentProvider",
]
