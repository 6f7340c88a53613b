"""
Shared fixtures.
"""

import pytest


class FakeTracker:
    """Stands in for HandTracker in lifecycle tests."""

    def __init__(self):
        self.running = False
        self.ready = False
        self.starts = 0
        self.stops = 0

    def start_tracking(self):
        self.running = True
        self.starts += 1

    def stop_tracking(self):
        self.running = False
        self.ready = False
        self.stops += 1

    def is_running(self):
        return self.running

    def is_ready(self):
        return self.ready


@pytest.fixture
def tracker():
    return FakeTracker()
