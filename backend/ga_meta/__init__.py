"""
Grand Archive meta-game crawler and aggregation backend.
"""
__version__ = "1.0.0"
