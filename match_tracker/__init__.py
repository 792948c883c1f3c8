"""
Club Match Tracker
Crawlt die Spielberichte eines Vereins auf basquetcatala.cat und verfolgt Änderungen
"""

__version__ = "1.0.0"
__author__ = "Sports Data Team"

# NOTE:
# Keep "import match_tracker" free of side effects. Settings are read from the
# environment on first import of match_tracker.core, which unit tests for the
# parsers and the diff engine never need.

__all__ = []
