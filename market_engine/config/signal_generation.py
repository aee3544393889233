"""
Configuration for the signal generation pipeline.

This module provides configuration classes for all components of the
signal generation system. Components accept plain dictionaries, so
``SignalGenerationConfig().to_dict()`` is the usual way to hand these
defaults to ``MarketAnalysisEngine``.
"""

from typing import Any, Dict, List
from pydantic_settings import BaseSettings, SettingsConfigDict


class IndicatorConfig(BaseSettings):
    """Configuration for the indicator library."""
    model_config = SettingsConfigDict(env_prefix='SIGNAL_INDICATOR_')

    rsi_period: int = 14
    support_resistance_window: int = 50
    atr_period: int = 14


class TimeframeSignalConfig(BaseSettings):
    """Configuration for per-timeframe signal generation."""
    model_config = SettingsConfigDict(env_prefix='SIGNAL_TIMEFRAME_')

    timeframes: List[str] = ["1m", "5m", "15m", "1h", "4h", "1d"]
    min_bars: int = 50

    # RSI thresholds
    oversold_threshold: float = 30.0
    overbought_threshold: float = 70.0

    # Confidence adjustments, all additive from the base
    base_confidence: int = 50
    rsi_confidence_boost: int = 15
    macd_confidence_boost: int = 10
    volume_confidence_boost: int = 12
    max_confidence: int = 95


class PriceTargetConfig(BaseSettings):
    """Configuration for ATR-derived target and stop-loss bands."""
    model_config = SettingsConfigDict(env_prefix='SIGNAL_TARGETS_')

    target_atr_multiple: float = 3.0
    stop_atr_multiple: float = 1.5

    # Offsets are fractions of the entry price
    min_target_offset: float = 0.03
    max_target_offset: float = 0.08
    min_stop_offset: float = 0.02
    max_stop_offset: float = 0.04


class ConsensusCombinerConfig(BaseSettings):
    """Configuration for multi-timeframe consensus."""
    model_config = SettingsConfigDict(env_prefix='SIGNAL_CONSENSUS_')

    consensus_threshold: float = 0.6
    min_signals: int = 3
    max_confidence: int = 95


class MarketRegimeConfig(BaseSettings):
    """Configuration for market regime detection."""
    model_config = SettingsConfigDict(env_prefix='SIGNAL_REGIME_')

    reference_symbol: str = "BTC"
    min_bars: int = 20
    history_size: int = 200

    # Classification thresholds
    bull_trend_threshold: float = 0.7
    bull_max_volatility: float = 0.6
    bear_trend_threshold: float = -0.7
    bear_min_volatility: float = 0.4
    transition_volatility: float = 0.8

    # Neutral inputs used when the reference series is too short
    default_volatility: float = 0.5
    default_trend: float = 0.0


class SentimentConfig(BaseSettings):
    """Configuration for sentiment aggregation."""
    model_config = SettingsConfigDict(env_prefix='SIGNAL_SENTIMENT_')

    sources: List[str] = ["twitter", "reddit", "discord", "telegram"]
    default_fear_greed_index: int = 50


class SignalGenerationConfig(BaseSettings):
    """Main configuration for the signal generation pipeline."""
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # Component configurations
    indicators: IndicatorConfig = IndicatorConfig()
    timeframe_signal: TimeframeSignalConfig = TimeframeSignalConfig()
    price_targets: PriceTargetConfig = PriceTargetConfig()
    consensus_combiner: ConsensusCombinerConfig = ConsensusCombinerConfig()
    market_regime: MarketRegimeConfig = MarketRegimeConfig()
    sentiment: SentimentConfig = SentimentConfig()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "indicators": self.indicators.model_dump(),
            "timeframe_signal": self.timeframe_signal.model_dump(),
            "price_targets": self.price_targets.model_dump(),
            "consensus_combiner": self.consensus_combiner.model_dump(),
            "market_regime": self.market_regime.model_dump(),
            "sentiment": self.sentiment.model_dump(),
        }


# Default configuration instance
signal_generation_config = SignalGenerationConfig()
