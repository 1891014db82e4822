"""
Driver lifetime value estimation from per-ride donation records
"""

__version__ = "1.0.0"
