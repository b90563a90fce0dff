"""
Country-based filtering for radio contact CSV exports.
"""

__version__ = "0.1.0"
