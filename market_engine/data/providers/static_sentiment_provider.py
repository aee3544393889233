"""
Static sentiment provider.

Serves caller-supplied readings per symbol without any network access. This
is the deterministic stand-in for real multi-platform feeds, useful in tests,
backfills and for callers that already hold the numbers.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

from .base_provider import SentimentProvider


@dataclass
class SentimentReadings:
    """Raw, unnormalised sentiment inputs for one symbol."""
    sources: Dict[str, float] = field(default_factory=dict)
    fear_greed_index: Optional[float] = None
    social_mentions: Optional[int] = None
    whale_activity: Optional[str] = None
    institutional_flow: Optional[str] = None
    news_sentiment: Optional[float] = None


class StaticSentimentProvider(SentimentProvider):
    """Sentiment provider backed by an in-memory mapping of readings."""

    def __init__(self, readings: Optional[Dict[str, SentimentReadings]] = None):
        self._readings: Dict[str, SentimentReadings] = dict(readings or {})

    def update(self, symbol: str, readings: SentimentReadings):
        """Replace the readings served for a symbol."""
        self._readings[symbol] = readings

    def _get(self, symbol: str) -> SentimentReadings:
        return self._readings.get(symbol) or SentimentReadings()

    async def fetch_source_sentiment(self, symbol: str) -> Dict[str, float]:
        return dict(self._get(symbol).sources)

    async def fetch_fear_greed_index(self, symbol: str) -> Optional[float]:
        return self._get(symbol).fear_greed_index

    async def fetch_social_mentions(self, symbol: str) -> Optional[int]:
        return self._get(symbol).social_mentions

    async def fetch_whale_activity(self, symbol: str) -> Optional[str]:
        return self._get(symbol).whale_activity

    async def fetch_institutional_flow(self, symbol: str) -> Optional[str]:
        return self._get(symbol).institutional_flow

    async def fetch_news_sentiment(self, symbol: str) -> Optional[float]:
        return self._get(symbol).news_sentiment
