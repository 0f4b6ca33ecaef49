import textwrap

from handlegen.backends import resolve_backend
from handlegen.codegen import build_pool_impl
from handlegen.config import GenerationOptions
from handlegen.parser import parse_declaration


def _pool(source, backend="Postgres", options=None):
    decl = parse_declaration(textwrap.dedent(source), backend)
    return build_pool_impl(decl, resolve_backend(backend), options or GenerationOptions())


def test_pool_impl_text(simple_source) -> None:
    text = _pool(simple_source)
    assert text == textwrap.dedent('''\
        class NumbersPool(Numbers):
            """Numbers over an asyncpg.Pool, using one connection per call."""

            def __init__(self, pool: "asyncpg.Pool") -> None:
                self.pool = pool

            async def insert(self, a: int) -> None:
                async with self.pool.acquire() as conn:
                    return await NumbersConnection(conn).insert(a)

            async def count(self) -> int:
                async with self.pool.acquire() as conn:
                    return await NumbersConnection(conn).count()''')


def test_only_public_methods_are_pooled(richer_source) -> None:
    text = _pool(richer_source)
    assert "async def insert" in text
    assert "async def rename" in text
    assert "_label" not in text
    assert "__audit" not in text


def test_pool_keeps_real_defaults_and_forwards_by_name(richer_source) -> None:
    text = _pool(richer_source)
    assert 'async def rename(self, name: str = "anon", *, strict: bool = False) -> str:' in text
    assert "return await NumbersConnection(conn).rename(name, strict=strict)" in text


def test_variadics_are_unpacked() -> None:
    text = _pool('''
        class Repo:
            async def op(self, a, *args, limit=10, **kwargs):
                pass
    ''')
    assert "return await RepoConnection(conn).op(a, *args, limit=limit, **kwargs)" in text


def test_local_name_avoids_parameters() -> None:
    text = _pool('''
        class Repo:
            async def copy(self, conn, conn_):
                pass
    ''')
    assert "async with self.pool.acquire() as conn__:" in text
    assert "RepoConnection(conn__).copy(conn, conn_)" in text


def test_mysql_pool_type(simple_source) -> None:
    text = _pool(simple_source, backend="MySql")
    assert 'def __init__(self, pool: "aiomysql.Pool") -> None:' in text


def test_custom_suffixes(simple_source) -> None:
    options = GenerationOptions(connection_suffix="Direct", pool_suffix="Pooled")
    text = _pool(simple_source, options=options)
    assert text.startswith("class NumbersPooled(Numbers):")
    assert "NumbersDirect(conn).insert(a)" in text
