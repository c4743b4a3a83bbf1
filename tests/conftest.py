"""Shared fixtures."""

import pytest

from microemitter import EventEmitter, clear


class RecordingSink:
    """Diagnostic sink that keeps what it receives."""

    def __init__(self):
        self.warnings = []
        self.errors = []

    def warn(self, message):
        self.warnings.append(message)

    def error(self, message, cause):
        self.errors.append((message, cause))


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def emitter(sink):
    return EventEmitter(sink=sink)


@pytest.fixture(autouse=True)
def _reset_default_emitter():
    clear()
    yield
    clear()
