"""
Gully Scorebook - ball-by-ball scoring for informal cricket
"""
__version__ = "0.1.0"
