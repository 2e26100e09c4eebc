"""
Models module for photoshelf.

This module contains data models:
- ImageRecord: one row of the image metadata table
- Month: calendar month used for bucketing and navigation
"""

from .image_record import ImageRecord, parse_timestamp
from .month import Month, MonthBounds

__all__ = [
    "ImageRecord",
    "Month",
    "MonthBounds",
    "parse_timestamp",
]
