"""
Applications Package für den Match Tracker

Enthält die Hauptanwendungsklasse, die alle Komponenten verdrahtet.
"""

from .tracker_app import MatchTrackerApp

__all__ = ["MatchTrackerApp"]
