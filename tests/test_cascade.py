"""Tests for closing parent epics after a child closes"""

from epictrac.models import Status
from epictrac.storage.cascade import (
    cascade_close,
    close_eligible_epics,
    parent_checks,
)


def test_parent_checks(epic_service, issues, make_epic, make_task, link):
    epic = make_epic()
    task1 = make_task("Task 1")
    task2 = make_task("Task 2")
    link(task1, epic)
    link(task2, epic)

    issues.close_issue(task1.id)
    checks = parent_checks(epic_service, task1.id)
    assert [(check.epic.id, check.eligible) for check in checks] == [(epic.id, False)]

    issues.close_issue(task2.id)
    checks = parent_checks(epic_service, task2.id)
    assert [(check.epic.id, check.eligible) for check in checks] == [(epic.id, True)]
    assert checks[0].should_close is True


def test_parent_checks_does_not_close(epic_service, issues, make_epic, make_task, link):
    epic = make_epic()
    task = make_task()
    link(task, epic)
    issues.close_issue(task.id)

    parent_checks(epic_service, task.id)
    assert issues.get_issue(epic.id).status == Status.OPEN


def test_closed_parent_is_not_reclosed(epic_service, issues, make_epic, make_task, link):
    epic = make_epic()
    task = make_task()
    link(task, epic)
    issues.close_issue(task.id)
    issues.close_issue(epic.id)

    check = parent_checks(epic_service, task.id)[0]
    assert check.eligible is True
    assert check.should_close is False


def test_cascade_close_last_child(epic_service, issues, make_epic, make_task, link):
    epic = make_epic()
    task1 = make_task("Task 1")
    task2 = make_task("Task 2")
    link(task1, epic)
    link(task2, epic)

    assert cascade_close(epic_service, issues, task1.id, reason="Done") == [task1.id]
    assert issues.get_issue(epic.id).status == Status.OPEN

    assert cascade_close(epic_service, issues, task2.id, reason="Done") == [task2.id, epic.id]
    assert issues.get_issue(epic.id).status == Status.CLOSED
    assert epic_service.list_eligible_epics() == []


def test_cascade_close_multi_level(epic_service, issues, make_epic, make_task, link):
    program = make_epic("Program")
    first = make_epic("First")
    second = make_epic("Second")
    link(first, program)
    link(second, program)
    task_a = make_task("A")
    task_b = make_task("B")
    link(task_a, first)
    link(task_b, second)

    # Second's child closes: Second closes, Program still waits on First
    assert cascade_close(epic_service, issues, task_b.id) == [task_b.id, second.id]
    assert issues.get_issue(program.id).status == Status.OPEN

    # First's child closes: First closes, then Program
    assert cascade_close(epic_service, issues, task_a.id) == [task_a.id, first.id, program.id]
    assert issues.get_issue(program.id).status == Status.CLOSED


def test_cascade_close_through_shared_child(epic_service, issues, make_epic, make_task, link):
    first = make_epic("First", priority=0)
    second = make_epic("Second", priority=1)
    shared = make_task("Shared")
    other = make_task("Other")
    link(shared, first)
    link(shared, second)
    link(other, second)

    assert cascade_close(epic_service, issues, shared.id) == [shared.id, first.id]
    assert issues.get_issue(second.id).status == Status.OPEN


def test_cascade_close_missing_issue(epic_service, issues):
    assert cascade_close(epic_service, issues, "test-missing") is None


def test_close_eligible_epics(epic_service, issues, make_epic, make_task, link):
    ready = make_epic("Ready")
    waiting = make_epic("Waiting")
    empty = make_epic("Empty")
    done = make_task("Done")
    open_task = make_task("Open")
    link(done, ready)
    link(open_task, waiting)
    issues.close_issue(done.id)

    preview = close_eligible_epics(epic_service, issues, dry_run=True)
    assert [status.epic.id for status in preview] == [ready.id]
    assert issues.get_issue(ready.id).status == Status.OPEN

    closed = close_eligible_epics(epic_service, issues, actor="test")
    assert [status.epic.id for status in closed] == [ready.id]
    assert issues.get_issue(ready.id).status == Status.CLOSED
    assert {status.epic.id for status in epic_service.list_eligible_epics()} == {waiting.id, empty.id}


def test_rescan_catches_missed_close(epic_service, issues, make_epic, make_task, link):
    """Children closed without a cascade are picked up by the periodic scan"""
    epic = make_epic()
    task1 = make_task("Task 1")
    task2 = make_task("Task 2")
    link(task1, epic)
    link(task2, epic)
    issues.close_issue(task1.id)
    issues.close_issue(task2.id)

    closed = close_eligible_epics(epic_service, issues)
    assert [status.epic.id for status in closed] == [epic.id]
