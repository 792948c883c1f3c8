"""
API Package
FastAPI-Fassade für Snapshot, Metadaten, Historie und manuelle Updates
"""
