import asyncio
import contextlib
import inspect
import itertools
import logging
import sys
import textwrap
import types

import pytest


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Run async test functions without requiring external plugins."""
    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            # Filter funcargs to only include parameters the function expects
            sig = inspect.signature(test_function)
            filtered_args = {k: v for k, v in pyfuncitem.funcargs.items() if k in sig.parameters}
            loop.run_until_complete(test_function(**filtered_args))
        finally:
            loop.close()
            asyncio.set_event_loop(None)
        return True
    return None


def pytest_configure(config):
    """Register markers for pytest."""
    config.addinivalue_line("markers", "asyncio: mark async tests")
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture(autouse=True)
def reset_handlegen_logger():
    """Undo logging configuration applied by CLI invocations."""
    logger = logging.getLogger("handlegen")
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


# ---------------------------------------------------------------------------
# Sample inputs
# ---------------------------------------------------------------------------

SIMPLE_SOURCE = textwrap.dedent('''\
    class Numbers:
        async def insert(self, a: int) -> None:
            await self.execute("INSERT INTO numbers (num) VALUES ($1)", a)

        async def count(self) -> int:
            return await self.fetchval("SELECT count(*) FROM numbers")
''')

RICHER_SOURCE = textwrap.dedent('''\
    class NumbersRepo(Numbers):
        async def insert(self, a: int) -> None:
            await self.execute("INSERT INTO numbers (num) VALUES ($1)", a)

        async def rename(self, name: str = "anon", *, strict: bool = False) -> str:
            return await self._label(name, strict)

        async def _label(self, name, strict):
            await self.execute("UPDATE labels SET name = $1", name)
            return name.upper() if strict else name

        async def __audit(self) -> None:
            await self.execute("INSERT INTO audit DEFAULT VALUES")
''')

MODULE_SOURCE = textwrap.dedent('''\
    """Numbers storage."""

    from __future__ import annotations

    from handlegen import handlegen

    TABLE = "numbers"


    @handlegen("Postgres")
    class NumbersRepo(Numbers):
        async def insert(self, a: int) -> None:
            await self.execute(f"INSERT INTO {TABLE} (num) VALUES ($1)", a)

        async def fetch(self, a: int, *rest: int, limit: int = 10) -> list:
            return await self.fetch_rows(a, *rest, limit=limit)

        async def _helper(self) -> None:
            await self.execute("SELECT 1")


    def unrelated() -> int:
        return 1
''')


@pytest.fixture
def simple_source():
    return SIMPLE_SOURCE


@pytest.fixture
def richer_source():
    return RICHER_SOURCE


@pytest.fixture
def module_source():
    return MODULE_SOURCE


# ---------------------------------------------------------------------------
# Fake driver objects
# ---------------------------------------------------------------------------

class FakeConnection:
    """Records the statements sent through it."""

    _ids = itertools.count(1)

    def __init__(self, values=None):
        self.id = next(self._ids)
        self.calls = []
        self.values = dict(values or {})

    async def execute(self, query, *args):
        self.calls.append(("execute", query, args))
        return "OK"

    async def fetchval(self, query, *args):
        self.calls.append(("fetchval", query, args))
        return self.values.get(query)

    async def fetch_rows(self, *args, **kwargs):
        self.calls.append(("fetch_rows", args, kwargs))
        return list(args)[: kwargs.get("limit", len(args))]


class FakePool:
    """Hands out FakeConnections and counts acquisitions and releases."""

    def __init__(self, values=None, fail_acquire=None, delay=0):
        self.values = values
        self.fail_acquire = fail_acquire
        self.delay = delay
        self.acquired = 0
        self.released = 0
        self.connections = []

    @property
    def in_use(self):
        return self.acquired - self.released

    @contextlib.asynccontextmanager
    async def acquire(self):
        if self.fail_acquire is not None:
            raise self.fail_acquire
        if self.delay:
            await asyncio.sleep(self.delay)
        conn = FakeConnection(self.values)
        self.connections.append(conn)
        self.acquired += 1
        try:
            yield conn
        finally:
            self.released += 1


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def fake_connection():
    return FakeConnection()


# ---------------------------------------------------------------------------
# Executing generated code
# ---------------------------------------------------------------------------

@pytest.fixture
def load_generated():
    """Execute generated source as a throwaway module and return it."""
    created = []
    counter = itertools.count()

    def _load(code, **namespace):
        name = f"_handlegen_generated_{next(counter)}"
        module = types.ModuleType(name)
        module.__dict__.update(namespace)
        sys.modules[name] = module
        created.append(name)
        exec(compile(code, f"<{name}>", "exec"), module.__dict__)
        return module

    yield _load
    for name in created:
        sys.modules.pop(name, None)


@pytest.fixture
def pool_factory():
    """Build FakePools with custom behaviour."""
    return FakePool
