"""
Locshare: opt-in location sharing client and capture record API
"""
__version__ = "1.0.0"
