"""
Result cache and the recomputation loop that keeps it fresh.
"""

from .state_manager import AnalysisStateManager, CacheWriteConflictError

__all__ = ["AnalysisStateManager", "CacheWriteConflictError"]
