# tests/conftest.py
import pytest

from ampify.core.managers.config_manager import config_manager
from ampify.core.utils.console_logger import ConsoleLogger


@pytest.fixture(autouse=True)
def reset_console_group():
    """De groepsdiepte is gedeeld over alle ConsoleLoggers; elke test begint op 0."""
    ConsoleLogger.set_group(0)
    yield
    ConsoleLogger.set_group(0)


@pytest.fixture(autouse=True)
def reset_config():
    """CLI-overrides schrijven in de gedeelde config; na elke test opnieuw laden."""
    yield
    config_manager.reset()
