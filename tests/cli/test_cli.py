"""
Tests for the handlegen command line.
"""

import logging

import pytest

from handlegen.cli import main


SOURCE = '''\
from handlegen import handlegen


@handlegen("Postgres")
class NumbersRepo(Numbers):
    async def insert(self, a: int) -> None:
        await self.execute("INSERT INTO numbers (num) VALUES ($1)", a)

    async def _helper(self) -> None:
        pass
'''


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """A workspace with one configured source."""
    (tmp_path / "numbers.py").write_text(SOURCE, encoding="utf-8")
    (tmp_path / "handlegen.toml").write_text(
        '[sources.numbers]\nfile = "numbers.py"\n', encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    for name in ("HANDLEGEN_RERAISE", "HANDLEGEN_DEBUG", "HANDLEGEN_VERBOSE", "HANDLEGEN_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestExpand:
    """Test 'handlegen expand'."""

    def test_expand_to_stdout(self, workspace, capsys):
        main(["expand", "numbers.py"])
        out = capsys.readouterr().out
        assert out.startswith("# Generated by handlegen")
        assert "class NumbersPool(Numbers):" in out
        assert not (workspace / "numbers_gen.py").exists()

    def test_expand_to_file(self, workspace, capsys):
        main(["expand", "numbers.py", "-o", "out/numbers_gen.py"])
        generated = (workspace / "out" / "numbers_gen.py").read_text(encoding="utf-8")
        assert "class NumbersRepo:" in generated
        assert "✓ Expanded numbers.py -> out/numbers_gen.py" in capsys.readouterr().out

    def test_expand_refuses_to_overwrite_input(self, workspace, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["expand", "numbers.py", "-o", "numbers.py"])
        assert exc_info.value.code == 1
        assert "CLI_VALIDATION_ERROR" in capsys.readouterr().err
        assert (workspace / "numbers.py").read_text(encoding="utf-8") == SOURCE

    def test_missing_file(self, workspace, capsys):
        with pytest.raises(SystemExit):
            main(["expand", "missing.py"])
        assert "CLI_FILE_NOT_FOUND" in capsys.readouterr().err

    def test_generation_error_is_reported(self, workspace, capsys):
        (workspace / "bad.py").write_text(
            '@handlegen("SQLite")\nclass Bad:\n    pass\n', encoding="utf-8"
        )
        with pytest.raises(SystemExit):
            main(["expand", "bad.py"])
        err = capsys.readouterr().err
        assert "Unsupported backend 'SQLite'" in err
        assert "HG002" in err

    def test_marker_override(self, workspace, capsys):
        (workspace / "custom.py").write_text(
            '@repository("MySql")\nclass Numbers:\n    async def count(self) -> int:\n        return 0\n',
            encoding="utf-8",
        )
        main(["expand", "custom.py", "--marker", "repository"])
        assert "import aiomysql" in capsys.readouterr().out

    def test_invalid_marker(self, workspace, capsys):
        with pytest.raises(SystemExit):
            main(["expand", "numbers.py", "--marker", "not valid"])
        assert "CLI_VALIDATION_ERROR" in capsys.readouterr().err

    def test_reraise_env(self, workspace, monkeypatch):
        monkeypatch.setenv("HANDLEGEN_RERAISE", "1")
        from handlegen.cli.errors import CLIFileNotFoundError

        with pytest.raises(CLIFileNotFoundError):
            main(["expand", "missing.py"])


class TestBuildAndCheck:
    """Test 'handlegen build' and 'handlegen check'."""

    def test_build_writes_outputs(self, workspace, capsys):
        main(["build"])
        generated = workspace / "numbers_gen.py"
        assert generated.exists()
        assert "class NumbersConnection(Numbers):" in generated.read_text(encoding="utf-8")
        assert "✓ numbers.py -> numbers_gen.py" in capsys.readouterr().out

    def test_check_after_build_passes(self, workspace, capsys):
        main(["build"])
        main(["check"])
        assert "numbers_gen.py is up to date" in capsys.readouterr().out

    def test_check_missing_output_fails(self, workspace, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["check"])
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "numbers_gen.py is missing" in captured.out
        assert "CLI_STALE_OUTPUT" in captured.err

    def test_check_stale_output_fails(self, workspace, capsys):
        main(["build"])
        source = workspace / "numbers.py"
        source.write_text(SOURCE.replace("numbers (num)", "numbers (value)"), encoding="utf-8")
        with pytest.raises(SystemExit):
            main(["check"])
        assert "numbers_gen.py is out of date" in capsys.readouterr().out

    def test_build_unknown_source(self, workspace, capsys):
        with pytest.raises(SystemExit):
            main(["build", "orders"])
        err = capsys.readouterr().err
        assert "CLI_CONFIG_ERROR" in err
        assert "numbers" in err

    def test_build_without_sources(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("HANDLEGEN_RERAISE", raising=False)
        monkeypatch.delenv("HANDLEGEN_DEBUG", raising=False)
        with pytest.raises(SystemExit):
            main(["build"])
        assert "No sources configured" in capsys.readouterr().err

    def test_header_can_be_disabled(self, workspace):
        (workspace / "handlegen.toml").write_text(
            '[defaults]\nheader = false\n\n[sources.numbers]\nfile = "numbers.py"\n',
            encoding="utf-8",
        )
        main(["build"])
        generated = (workspace / "numbers_gen.py").read_text(encoding="utf-8")
        assert generated.startswith("import dataclasses\n")

    def test_workspace_flag(self, workspace, tmp_path_factory, monkeypatch):
        monkeypatch.chdir(tmp_path_factory.mktemp("elsewhere"))
        main(["--workspace", str(workspace), "build"])
        assert (workspace / "numbers_gen.py").exists()

    def test_missing_config_flag(self, workspace, capsys):
        with pytest.raises(SystemExit):
            main(["--config", "nope.toml", "build"])
        assert "Configuration file not found" in capsys.readouterr().err

    def test_invalid_config(self, workspace, capsys):
        (workspace / "handlegen.toml").write_text("[defaults\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            main(["build"])
        assert "Invalid workspace configuration" in capsys.readouterr().err


class TestShowAndBackends:
    """Test the informational commands."""

    def test_show_lists_methods(self, workspace, capsys):
        main(["show", "numbers.py"])
        out = capsys.readouterr().out
        assert "NumbersRepo" in out
        assert "insert" in out
        assert "_helper" in out
        assert "restricted" in out

    def test_show_code(self, workspace, capsys):
        main(["show", "numbers.py", "--code"])
        assert "NumbersPool" in capsys.readouterr().out

    def test_show_without_tagged_classes(self, workspace, capsys):
        (workspace / "plain.py").write_text("x = 1\n", encoding="utf-8")
        main(["show", "plain.py"])
        assert "No @handlegen classes found" in capsys.readouterr().out

    def test_backends(self, workspace, capsys):
        main(["backends"])
        out = capsys.readouterr().out
        assert "Postgres" in out
        assert "asyncpg.Pool" in out
        assert "aiomysql" in out


class TestGlobalOptions:
    """Test top-level flags."""

    def test_no_command_prints_help(self, workspace, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().out

    def test_version(self, workspace, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("handlegen ")

    def test_log_level_configures_package_logger(self, workspace):
        main(["--log-level", "debug", "backends"])
        logger = logging.getLogger("handlegen")
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_log_level_from_environment(self, workspace, monkeypatch):
        monkeypatch.setenv("HANDLEGEN_LOG_LEVEL", "error")
        main(["backends"])
        assert logging.getLogger("handlegen").level == logging.ERROR
