"""
Checkmate - group accountability tracker
Weekly mate-call pairing, daily habit checks and a shared fine log
"""

__version__ = "1.0.0"
