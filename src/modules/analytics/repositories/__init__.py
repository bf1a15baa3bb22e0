"""Analytics read models."""

from modules.analytics.repositories.django_repository import AnalyticsDjangoRepository
from modules.analytics.repositories.interfaces import IAnalyticsRepository

__all__ = ["AnalyticsDjangoRepository", "IAnalyticsRepository"]
