"""
Shared pytest configuration for cmdroute tests.
"""

import pytest

from cmdroute.config.models import DispatchSettings
from cmdroute.core import (
    Dispatcher, FunctionSubCommand, InvokerKind, RecordingInstrumentation, SimpleInvoker
)


@pytest.fixture
def recorder():
    """Instrumentation bridge that keeps every event."""
    return RecordingInstrumentation()


@pytest.fixture
def settings():
    return DispatchSettings()


@pytest.fixture
def pay_calls():
    """Argument sequences the 'pay' sub-command was executed with."""
    return []


@pytest.fixture
def pay_command(pay_calls):
    """The 'pay' sub-command: alias 'p', needs 'pay', players only."""
    def execute(invoker, args):
        pay_calls.append(args)
        invoker.send_message(f"paid {args[2]} to {args[1]}")
        return True

    return FunctionSubCommand(
        "pay",
        execute,
        aliases=["p"],
        permission="pay",
        requires_permission=True,
        allow_console=False,
    )


@pytest.fixture
def econ(pay_command, recorder, settings):
    """Dispatcher rooted at 'econ' holding only 'pay'."""
    return Dispatcher("econ", settings=settings, instrumentation=recorder).add_subcommand(pay_command)


@pytest.fixture
def player():
    return SimpleInvoker("alice", kind=InvokerKind.PLAYER, permissions=["pay"])


@pytest.fixture
def console():
    return SimpleInvoker("CONSOLE", kind=InvokerKind.CONSOLE, permissions=["pay"])


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
