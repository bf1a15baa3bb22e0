"""Status repositories package."""

from modules.statuses.repositories.django_repository import StatusDjangoRepository
from modules.statuses.repositories.interfaces import IStatusRepository

__all__ = ["IStatusRepository", "StatusDjangoRepository"]
