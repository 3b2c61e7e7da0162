"""
PX Service - social image sharing API
"""

__version__ = "1.0.0"
