"""
Consensus Signal Combiner component.

This component reduces the per-timeframe signals of one symbol into a single
consensus call that is only emitted when a clear majority of timeframes
agree on the same signal kind.
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..core import CONSENSUS_TIMEFRAME, Signal, SignalKind


class ConsensusSignalCombiner:
    """
    Combines per-timeframe signals by majority vote.

    The most frequent signal kind wins if its share of the contributing
    signals reaches the consensus threshold. Confidence is the average
    timeframe confidence scaled by that share.
    """

    def __init__(self, config: Dict):
        """
        Initialize the consensus signal combiner.

        Args:
            config: Configuration dictionary with combining parameters
        """
        self.config = config

        # Voting thresholds
        self.consensus_threshold = config.get("consensus_threshold", 0.6)
        self.min_signals = config.get("min_signals", 3)
        self.max_confidence = config.get("max_confidence", 95)

    def combine_signals(self, signals: Sequence[Signal], symbol: str) -> Optional[Signal]:
        """
        Combine per-timeframe signals into a consensus signal.

        Args:
            signals: Per-timeframe signals for one symbol
            symbol: Trading symbol

        Returns:
            Optional[Signal]: Consensus signal, or None when there are too few
            signals or the dominant kind's share is below the threshold
        """
        if len(signals) < self.min_signals:
            return None

        dominant_kind, share = self._dominant_kind(signals)
        if share < self.consensus_threshold:
            return None

        avg_confidence = sum(s.confidence for s in signals) / len(signals)
        confidence = min(int(round(avg_confidence * share)), self.max_confidence)

        return Signal(
            symbol=symbol,
            kind=dominant_kind,
            confidence=confidence,
            timeframe=CONSENSUS_TIMEFRAME,
            entry_price=signals[0].entry_price,
            target_price=float(np.mean([s.target_price for s in signals])),
            stop_loss=float(np.mean([s.stop_loss for s in signals])),
            indicators=signals[0].indicators,
            reasoning=[f"Multi-timeframe consensus: {share * 100:.0f}% agreement"],
            patterns=self._merge_patterns(signals),
        )

    def _dominant_kind(self, signals: Sequence[Signal]):
        """
        Find the most frequent signal kind and its share.

        Counter preserves first-seen order, so ties go to the kind that
        appeared first.
        """
        counts = Counter(s.kind for s in signals)
        kind, count = counts.most_common(1)[0]
        return kind, count / len(signals)

    @staticmethod
    def _merge_patterns(signals: Sequence[Signal]) -> List[str]:
        """Ordered union of all contributing pattern names."""
        return list(dict.fromkeys(p for s in signals for p in s.patterns))

    def get_signal_distribution(self, signals: Sequence[Signal]) -> Dict[SignalKind, float]:
        """
        Get the distribution of signal kinds across timeframes.

        Args:
            signals: Per-timeframe signals

        Returns:
            Dict[SignalKind, float]: Share of each kind present
        """
        if not signals:
            return {SignalKind.HOLD: 1.0}

        counts = Counter(s.kind for s in signals)
        return {kind: count / len(signals) for kind, count in counts.items()}

    def get_disagreement_level(self, signals: Sequence[Signal]) -> float:
        """
        Calculate the level of disagreement among timeframes.

        Args:
            signals: Per-timeframe signals

        Returns:
            float: Disagreement level (0.0 to 1.0, where 1.0 is maximum disagreement)
        """
        if len(signals) < 2:
            return 0.0

        distribution = self.get_signal_distribution(signals)

        # Entropy as a measure of disagreement
        entropy = 0.0
        for share in distribution.values():
            if share > 0:
                entropy -= share * np.log2(share)

        # Normalize by the maximum entropy across all signal kinds
        max_entropy = np.log2(len(SignalKind))
        return float(entropy / max_entropy)
