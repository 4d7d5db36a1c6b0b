from .insight_service import InsightService

__all__ = ["InsightService"]
