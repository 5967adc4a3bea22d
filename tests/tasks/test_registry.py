import threading
import time

import pytest

from threadtask.tasks import ActionTask, ResultTask, TaskRegistry, TaskState, get_registry


def test_registry_is_singleton():
    assert get_registry() is TaskRegistry.instance()
    assert TaskRegistry() is get_registry()


def test_singleton_created_once_under_contention():
    TaskRegistry.reset()
    seen = []
    barrier = threading.Barrier(16)

    def grab():
        barrier.wait()
        seen.append(get_registry())

    threads = [threading.Thread(target=grab) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({id(r) for r in seen}) == 1


def test_finished_task_is_removed():
    gate = threading.Event()
    registry = get_registry()
    task = ActionTask(gate.wait)

    registry.add(task)
    task.start()
    assert task in registry

    gate.set()
    task.wait()

    assert task not in registry
    assert registry.tasks == frozenset()


def test_aborted_task_is_removed():
    registry = get_registry()
    task = ActionTask.run_new(time.sleep, 0.2)
    registry.add(task)

    task.abort()

    assert task not in registry
    assert task.state is TaskState.ABORTED


def test_adding_finished_task_is_ignored():
    registry = get_registry()
    task = ResultTask.run_new(lambda: 1)
    task.wait()

    registry.add(task)

    assert registry.count == 0
    assert task.on_end.subscriber_count == 0


def test_add_twice_is_noop():
    registry = get_registry()
    task = ActionTask(lambda: None)
    registry.add(task)
    registry.add(task)

    assert len(registry) == 1
    assert task.on_end.subscriber_count == 1


def test_discard():
    registry = get_registry()
    task = ActionTask(lambda: None)
    registry.add(task)
    registry.discard(task)
    registry.discard(task)

    assert task not in registry
    assert task.on_end.subscriber_count == 0


def test_concurrent_add_and_completion():
    registry = get_registry()
    tasks = [ActionTask(time.sleep, 0.001) for _ in range(40)]

    def add_and_start(task):
        registry.add(task)
        task.start()

    adders = [threading.Thread(target=add_and_start, args=(t,)) for t in tasks]
    for a in adders:
        a.start()
    for a in adders:
        a.join()
    for t in tasks:
        t.wait()

    assert registry.count == 0


def test_pool_size_is_advisory(fresh_config):
    fresh_config.update("tasks", "pool_size", 1)
    registry = get_registry()
    assert registry.pool_size == 1

    gate = threading.Event()
    tasks = [ActionTask.run_new(gate.wait) for _ in range(3)]
    for t in tasks:
        registry.add(t)

    assert registry.count == 3
    gate.set()
    for t in tasks:
        t.wait()
    assert registry.count == 0


def test_pool_size_follows_config(fresh_config):
    registry = get_registry()
    assert registry.pool_size == 8

    fresh_config.update("tasks", "pool_size", 4)

    assert registry.pool_size == 4


def test_pool_size_must_be_positive():
    with pytest.raises(ValueError):
        get_registry().pool_size = 0


def test_abort_all():
    registry = get_registry()
    pending = ActionTask(lambda: None)
    running = [ActionTask.run_new(time.sleep, 0.2) for _ in range(3)]
    registry.add(pending)
    for t in running:
        registry.add(t)

    registry.abort_all()

    assert all(t.state is TaskState.ABORTED for t in running)
    assert pending.state is TaskState.NOT_STARTED
    assert registry.tasks == frozenset({pending})
