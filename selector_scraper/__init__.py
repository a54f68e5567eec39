"""Concurrent selector-based web scraper."""

__version__ = "0.1.0"
