"""
Configuration loading for the business day calculator.
"""

from business_day_calculator.config.manager import ConfigManager

__all__ = ["ConfigManager"]
