"""
Monitoring Package für den Match Tracker

Enthält Prometheus Metriken.
"""

from .prometheus_metrics import PrometheusMetrics

__all__ = ["PrometheusMetrics"]
