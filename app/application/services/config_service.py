"""Config service — the singleton site settings row."""

import structlog

from app.domain.models.app_config import AppConfig
from app.domain.schemas.domain import AppConfigUpdate
from app.infrastructure.repositories.domain_repository import SQLAlchemyAppConfigRepository

logger = structlog.get_logger(__name__)


def get_config(repo: SQLAlchemyAppConfigRepository) -> AppConfig:
    """Stored settings, or transient defaults when the row is missing."""
    return repo.get_singleton() or AppConfig.defaults()


def ensure_config(repo: SQLAlchemyAppConfigRepository) -> AppConfig:
    config = repo.get_singleton()
    if config is None:
        config = repo.save(AppConfig.defaults())
        logger.info("Default settings row created")
    return config


def update_config(repo: SQLAlchemyAppConfigRepository, data: AppConfigUpdate) -> AppConfig:
    config = ensure_config(repo)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    config = repo.update(config, changes)
    logger.info("Settings updated", fields=sorted(changes))
    return config
