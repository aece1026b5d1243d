"""Insights domain - KPIs, recommendations and trends derived from completed jobs"""

from .engine import build_insights

__all__ = ["build_insights"]
