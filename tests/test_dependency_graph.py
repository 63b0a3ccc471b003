"""Tests for parent-child containment queries"""

from epictrac.models import ChildCounts, DependencyType, IssueType, Status
from epictrac.storage.graph import DependencyGraph


def test_parent_epics(epic_service, make_epic, make_task, link):
    epic = make_epic("Parent Epic")
    task1 = make_task("Task 1")
    task2 = make_task("Task 2")
    link(task1, epic)
    link(task2, epic)

    parents = epic_service.parent_epics(task1.id)
    assert [parent.id for parent in parents] == [epic.id]
    assert parents[0].title == "Parent Epic"

    # Epics have no parents in this scenario
    assert epic_service.parent_epics(epic.id) == []


def test_parent_epics_by_priority(epic_service, make_epic, make_task, link):
    low = make_epic("Low", priority=3)
    high = make_epic("High", priority=0)
    mid = make_epic("Mid", priority=1)
    task = make_task()
    for epic in (low, high, mid):
        link(task, epic)

    assert [parent.id for parent in epic_service.parent_epics(task.id)] == [high.id, mid.id, low.id]


def test_parent_epics_includes_closed_parents(epic_service, issues, make_epic, make_task, link):
    epic = make_epic()
    task = make_task()
    link(task, epic)
    issues.close_issue(epic.id)

    parents = epic_service.parent_epics(task.id)
    assert [parent.id for parent in parents] == [epic.id]
    assert parents[0].status == Status.CLOSED
    assert parents[0].closed_at is not None


def test_parent_epics_skips_non_epic_parents(epic_service, issues, make_epic, make_task, link):
    epic = make_epic()
    feature = issues.create_issue(title="Feature", issue_type=IssueType.FEATURE)
    task = make_task()
    link(task, epic)
    link(task, feature)

    assert [parent.id for parent in epic_service.parent_epics(task.id)] == [epic.id]


def test_parent_epics_skips_other_edge_types(epic_service, dependencies, make_epic, make_task):
    epic = make_epic()
    task = make_task()
    dependencies.add_dependency(task.id, epic.id, DependencyType.BLOCKS)

    assert epic_service.parent_epics(task.id) == []


def test_parent_epics_one_level_only(epic_service, make_epic, make_task, link):
    outer = make_epic("Outer")
    inner = make_epic("Inner")
    task = make_task()
    link(inner, outer)
    link(task, inner)

    assert [parent.id for parent in epic_service.parent_epics(task.id)] == [inner.id]
    assert [parent.id for parent in epic_service.parent_epics(inner.id)] == [outer.id]


def test_parent_epics_unknown_issue(epic_service):
    assert epic_service.parent_epics("test-missing") == []


def test_child_counts(database, issues, make_epic, make_task, link):
    graph = DependencyGraph(database)
    epic = make_epic()
    tasks = [make_task(f"Task {n}") for n in range(3)]
    for task in tasks:
        link(task, epic)
    issues.close_issue(tasks[0].id)

    counts = graph.child_counts(epic.id)
    assert counts == ChildCounts(total=3, closed=1)
    assert counts.eligible_for_close is False


def test_child_counts_missing_epic(database):
    assert DependencyGraph(database).child_counts("test-missing") == ChildCounts(0, 0)


def test_child_counts_ignores_blocking_edges(database, dependencies, make_epic, make_task):
    epic = make_epic()
    task = make_task()
    dependencies.add_dependency(task.id, epic.id, DependencyType.BLOCKS)

    assert DependencyGraph(database).child_counts(epic.id) == ChildCounts(0, 0)


def test_child_counts_is_per_epic(database, issues, make_epic, make_task, link):
    graph = DependencyGraph(database)
    first = make_epic("First")
    second = make_epic("Second")
    link(make_task("A"), first)
    closed = make_task("B")
    link(closed, second)
    link(make_task("C"), second)
    issues.close_issue(closed.id)

    assert graph.child_counts(first.id) == ChildCounts(1, 0)
    assert graph.child_counts(second.id) == ChildCounts(2, 1)
