"""Estadísticas del dashboard."""

from .dashboard import build_dashboard, defect_stats, monthly_counts, severity_distribution

__all__ = ["build_dashboard", "defect_stats", "monthly_counts", "severity_distribution"]
