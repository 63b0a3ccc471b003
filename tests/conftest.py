"""Test configuration and fixtures"""

import pytest
import tempfile
import shutil
import os
from pathlib import Path

from epictrac.models import IssueType
from epictrac.storage.database import Database, reset_database_globals
from epictrac.storage.dependency_service import DependencyService
from epictrac.storage.epic_service import EpicService
from epictrac.storage.issue_service import IssueService

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation"""
    temp_dir = tempfile.mkdtemp()
    original_cwd = os.getcwd()
    os.chdir(temp_dir)
    
    yield Path(temp_dir)
    
    os.chdir(original_cwd)
    reset_database_globals()
    shutil.rmtree(temp_dir, ignore_errors=True)

@pytest.fixture
def database(temp_dir):
    """SQLite store with the issues and dependencies tables"""
    database = Database(f"sqlite:///{temp_dir}/test.db")
    database.create_tables()
    
    yield database
    
    database.dispose()

@pytest.fixture
def issues(database):
    return IssueService(database, prefix="test")

@pytest.fixture
def dependencies(database):
    return DependencyService(database)

@pytest.fixture
def epic_service(database):
    return EpicService(database)

@pytest.fixture
def make_epic(issues):
    """Create an open epic"""
    def _make(title="Test Epic", priority=1, **kwargs):
        return issues.create_issue(
            title=title,
            description="Epic for testing",
            priority=priority,
            issue_type=IssueType.EPIC,
            actor="test-user",
            **kwargs
        )
    return _make

@pytest.fixture
def make_task(issues):
    """Create an open task"""
    def _make(title="Task", priority=2, **kwargs):
        return issues.create_issue(
            title=title,
            priority=priority,
            issue_type=IssueType.TASK,
            actor="test-user",
            **kwargs
        )
    return _make

@pytest.fixture
def link(dependencies):
    """Add a parent-child edge"""
    def _link(child, parent):
        dependency = dependencies.add_child(parent.id, child.id, actor="test-user")
        assert dependency is not None
        return dependency
    return _link
