"""
Business day calculator for venues whose trading hours cross midnight.
"""

__version__ = "0.1.0"
