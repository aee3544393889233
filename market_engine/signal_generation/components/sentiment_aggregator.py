"""
Sentiment Aggregator component.

This component collects per-source sentiment scores and the related gauges
(fear/greed, social mentions, whale activity, institutional flow and news
sentiment) from a SentimentProvider and combines them into one
SentimentAnalysis record. The sub-fetches are independent of each other and
run concurrently.
"""

import asyncio
import logging
import math
from typing import Dict, Optional, Type, TypeVar

from ..core import InstitutionalFlow, SentimentAnalysis, WhaleActivity
from ...data.providers.base_provider import SentimentProvider
from ...data.providers.static_sentiment_provider import SentimentReadings

logger = logging.getLogger(__name__)

E = TypeVar("E", WhaleActivity, InstitutionalFlow)


def _finite(value) -> Optional[float]:
    """Return value as a float, or None when missing or not a finite number."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def clamp_score(value, default: float = 0.0) -> float:
    """Normalise a sentiment score into [-1, 1]."""
    number = _finite(value)
    if number is None:
        return default
    return max(-1.0, min(1.0, number))


def clamp_index(value, default: int = 50) -> int:
    """Normalise a fear/greed reading into an integer in [0, 100]."""
    number = _finite(value)
    if number is None:
        return default
    return int(max(0, min(100, round(number))))


def clamp_count(value) -> int:
    """Normalise a mention count into a non-negative integer."""
    number = _finite(value)
    if number is None:
        return 0
    return max(0, int(number))


def parse_classification(value, enum_cls: Type[E]) -> E:
    """Map a provider string onto a classification, neutral when unknown."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return enum_cls.NEUTRAL


class SentimentAggregator:
    """
    Aggregates multi-source sentiment for a symbol.

    Overall sentiment is the arithmetic mean of the configured sources'
    scores. Each gauge is normalised into its range on its own, so a bad
    value from one input never affects the others.
    """

    def __init__(self, provider: Optional[SentimentProvider], config: Dict):
        """
        Initialize the sentiment aggregator.

        Args:
            provider: Source of sentiment inputs; None yields neutral records
            config: Configuration dictionary with sources and defaults
        """
        self.provider = provider
        self.config = config
        self.sources = list(config.get("sources", ["twitter", "reddit", "discord", "telegram"]))
        self.default_fear_greed_index = config.get("default_fear_greed_index", 50)

    async def fetch_readings(self, symbol: str) -> SentimentReadings:
        """
        Fetch all raw inputs for a symbol concurrently.

        Args:
            symbol: Trading symbol

        Returns:
            SentimentReadings: Raw provider values, not yet normalised
        """
        if self.provider is None:
            return SentimentReadings()

        fields = (
            "sources",
            "fear_greed_index",
            "social_mentions",
            "whale_activity",
            "institutional_flow",
            "news_sentiment",
        )
        results = await asyncio.gather(
            self.provider.fetch_source_sentiment(symbol),
            self.provider.fetch_fear_greed_index(symbol),
            self.provider.fetch_social_mentions(symbol),
            self.provider.fetch_whale_activity(symbol),
            self.provider.fetch_institutional_flow(symbol),
            self.provider.fetch_news_sentiment(symbol),
            return_exceptions=True,
        )

        # A failed sub-fetch falls back to its neutral default
        values = {}
        for name, result in zip(fields, results):
            if isinstance(result, Exception):
                logger.warning(f"Sentiment fetch {name} failed for {symbol}: {result}")
                result = None
            elif isinstance(result, BaseException):
                raise result
            values[name] = result

        values["sources"] = values["sources"] or {}
        return SentimentReadings(**values)

    def aggregate(self, symbol: str, readings: SentimentReadings) -> SentimentAnalysis:
        """
        Combine raw readings into a SentimentAnalysis.

        Only configured sources that actually reported contribute to the
        overall score; with no reporting source the overall score is 0.0.

        Args:
            symbol: Trading symbol
            readings: Raw provider values

        Returns:
            SentimentAnalysis: Normalised composite sentiment
        """
        breakdown = {
            source: clamp_score(readings.sources[source])
            for source in self.sources
            if _finite(readings.sources.get(source)) is not None
        }
        overall = sum(breakdown.values()) / len(breakdown) if breakdown else 0.0

        return SentimentAnalysis(
            symbol=symbol,
            overall_sentiment=clamp_score(overall),
            fear_greed_index=clamp_index(readings.fear_greed_index, self.default_fear_greed_index),
            social_mentions=clamp_count(readings.social_mentions),
            whale_activity=parse_classification(readings.whale_activity, WhaleActivity),
            institutional_flow=parse_classification(readings.institutional_flow, InstitutionalFlow),
            news_sentiment=clamp_score(readings.news_sentiment),
            sources=breakdown,
        )

    async def analyze(self, symbol: str) -> SentimentAnalysis:
        """
        Fetch and aggregate sentiment for a symbol.

        Args:
            symbol: Trading symbol

        Returns:
            SentimentAnalysis: Composite sentiment
        """
        readings = await self.fetch_readings(symbol)
        analysis = self.aggregate(symbol, readings)
        logger.debug(
            f"Sentiment for {symbol}: overall={analysis.overall_sentiment:.3f} "
            f"from {len(analysis.sources)} sources"
        )
        return analysis
