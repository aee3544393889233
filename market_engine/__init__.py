"""
Market Signal Engine.

Technical-indicator signals, multi-timeframe consensus, market regime
classification and multi-source sentiment aggregation over caller-supplied
price/volume windows.
"""

__version__ = "1.0.0"
