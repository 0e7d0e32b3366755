"""Shared pytest fixtures for reactbox tests."""

import pytest

import reactbox._scheduler as _sched


@pytest.fixture(autouse=True)
def reset_scheduler():
    """Each test starts and ends without a UI-thread scheduler."""
    _sched.set_scheduler(None)
    yield
    _sched.set_scheduler(None)
