import asyncio
import inspect

import pytest

from conversations import build_registry
from engine.flow_engine import FlowEngine
from models.models import ConversationRecord
from providers.state_store import MemoryStateStore


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: run the coroutine test in a fresh event loop"
    )


@pytest.hookimpl
def pytest_pyfunc_call(pyfuncitem):
    if not inspect.iscoroutinefunction(pyfuncitem.obj):
        return None
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    testargs = {
        arg: pyfuncitem.funcargs[arg]
        for arg in pyfuncitem._fixtureinfo.argnames
    }
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(pyfuncitem.obj(**testargs))
    finally:
        asyncio.set_event_loop(None)
        loop.close()
    return True


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def record() -> ConversationRecord:
    return ConversationRecord()


@pytest.fixture
def engine(registry, record) -> FlowEngine:
    return FlowEngine(registry, record)


@pytest.fixture
def store() -> MemoryStateStore:
    return MemoryStateStore()
