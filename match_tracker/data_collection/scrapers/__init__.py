"""
Data Collection Scrapers Package

Note: avoid importing scraper modules at package import time to keep imports
lightweight (important for unit tests that only need the parsers). Import
concrete scrapers from their modules directly, e.g.:

    from match_tracker.data_collection.scrapers.basquetcatala.club_scraper import BasquetCatalaScraper
"""

__all__ = []
