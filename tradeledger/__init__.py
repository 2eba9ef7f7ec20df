"""
tradeledger - import and analyse marketplace trade history exports.
"""

__version__ = "0.1.0"
