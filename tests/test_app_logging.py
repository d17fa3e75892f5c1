"""Tests for logging configuration."""

import logging

from nutrition_planner.api.app import create_app
from nutrition_planner.app_logging import configure_logging
from nutrition_planner.containers import AppContainer


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("nutrition_planner")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.propagate is False


def test_configure_logging_sets_level() -> None:
    logger = logging.getLogger("nutrition_planner")
    configure_logging(logging.DEBUG)
    assert logger.level == logging.DEBUG
    configure_logging()
    assert logger.level == logging.INFO


def test_create_app_uses_configured_level(container: AppContainer) -> None:
    logger = logging.getLogger("nutrition_planner")
    container.settings = container.settings.model_copy(update={"log_level": "debug"})

    create_app(container)
    assert logger.level == logging.DEBUG

    configure_logging()
    assert logger.level == logging.INFO
