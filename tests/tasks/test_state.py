import pytest

from threadtask.tasks import TaskAborted, TaskError, TaskState, TaskStateError, VALID_TRANSITIONS, can_transition


def test_lifecycle_path_is_valid():
    assert can_transition(TaskState.NOT_STARTED, TaskState.RUNNING)
    assert can_transition(TaskState.RUNNING, TaskState.COMPLETED)
    assert can_transition(TaskState.RUNNING, TaskState.ABORTED)


@pytest.mark.parametrize("current,target", [
    (TaskState.NOT_STARTED, TaskState.COMPLETED),
    (TaskState.NOT_STARTED, TaskState.ABORTED),
    (TaskState.RUNNING, TaskState.NOT_STARTED),
    (TaskState.RUNNING, TaskState.RUNNING),
    (TaskState.COMPLETED, TaskState.ABORTED),
    (TaskState.ABORTED, TaskState.COMPLETED),
    (TaskState.COMPLETED, TaskState.RUNNING),
])
def test_invalid_transitions(current, target):
    assert not can_transition(current, target)


def test_terminal_states_have_no_successors():
    for state in TaskState:
        assert state.is_terminal == (not VALID_TRANSITIONS[state])


def test_exception_hierarchy():
    assert issubclass(TaskStateError, TaskError)
    # Must not be caught by `except Exception` in user code
    assert not issubclass(TaskAborted, Exception)
