import sys

import pytest
from loguru import logger

from threadtask.core import setup_logging
from threadtask.tasks import ActionTask


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_setup_logging_writes_task_lifecycle(tmp_path, restore_logger):
    log_dir = tmp_path / "logs"
    setup_logging(debug_mode=True, log_dir=str(log_dir))

    task = ActionTask.run_new(lambda: None, name="logged-task")
    task.wait()
    logger.remove()  # closes the file sink

    files = list(log_dir.glob("threadtask_*.log"))
    assert len(files) == 1
    text = files[0].read_text(encoding="utf-8")
    assert "Logging initialized." in text
    assert "Task 'logged-task': running -> completed" in text


def test_setup_logging_without_file(tmp_path, restore_logger, monkeypatch):
    monkeypatch.chdir(tmp_path)
    setup_logging(debug_mode=False, log_dir="")

    assert not any(tmp_path.iterdir())
