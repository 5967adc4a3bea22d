import pytest
from PySide6.QtCore import QCoreApplication

from threadtask.core import ConfigManager, set_config
from threadtask.tasks import TaskRegistry


@pytest.fixture(autouse=True)
def fresh_config():
    """Give every test its own in-memory config and registry."""
    config = ConfigManager()
    set_config(config)
    TaskRegistry.reset()
    yield config
    TaskRegistry.reset()


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
