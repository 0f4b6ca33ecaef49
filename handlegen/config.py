"""Workspace configuration support for the handlegen CLI."""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("handlegen.toml", ".handlegenrc")
PYPROJECT_TABLE = ("tool", "handlegen")


@dataclass(frozen=True)
class GenerationOptions:
    """Naming knobs threaded through the generator."""

    marker: str = "handlegen"
    connection_suffix: str = "Connection"
    pool_suffix: str = "Pool"

    def __post_init__(self) -> None:
        if not self.marker.isidentifier():
            raise ValueError(f"marker must be an identifier, got {self.marker!r}")
        for label, suffix in (("connection_suffix", self.connection_suffix), ("pool_suffix", self.pool_suffix)):
            if not suffix or not f"X{suffix}".isidentifier():
                raise ValueError(f"{label} must be an identifier fragment, got {suffix!r}")
        if self.connection_suffix == self.pool_suffix:
            raise ValueError("connection_suffix and pool_suffix must differ")


@dataclass
class WorkspaceDefaults:
    """Defaults applied to every configured source."""

    options: GenerationOptions = field(default_factory=GenerationOptions)
    out_suffix: str = "_gen"
    header: bool = True


@dataclass
class SourceConfig:
    """One module to expand and where the expansion goes."""

    name: str
    file: Path
    out: Path


@dataclass
class WorkspaceConfig:
    """Resolved workspace configuration."""

    root: Path
    defaults: WorkspaceDefaults
    sources: Dict[str, SourceConfig] = field(default_factory=dict)
    path: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def options(self) -> GenerationOptions:
        return self.defaults.options

    def is_empty(self) -> bool:
        return not self.sources

    def select(self, names: Optional[Sequence[str]]) -> List[SourceConfig]:
        if not names:
            return list(self.sources.values())
        selected: List[SourceConfig] = []
        for name in names:
            key = name if name in self.sources else None
            if key is None:
                for candidate, cfg in self.sources.items():
                    if cfg.file.name == name or cfg.file.as_posix() == name:
                        key = candidate
                        break
            if key is None:
                raise KeyError(f"Source '{name}' is not defined in workspace config.")
            selected.append(self.sources[key])
        return selected


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    return json.loads(content)


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _pyproject_table(path: Path) -> Optional[Dict[str, Any]]:
    data: Any = _read_toml_config(path)
    for key in PYPROJECT_TABLE:
        if not isinstance(data, dict) or key not in data:
            return None
        data = data[key]
    return data if isinstance(data, dict) else None


def default_out_path(file: Path, out_suffix: str) -> Path:
    return file.with_name(f"{file.stem}{out_suffix}{file.suffix or '.py'}")


def _parse_defaults(data: Dict[str, Any]) -> WorkspaceDefaults:
    defaults_section = data.get("defaults") or {}
    base = GenerationOptions()
    options = replace(
        base,
        marker=str(defaults_section.get("marker") or base.marker),
        connection_suffix=str(defaults_section.get("connection_suffix") or base.connection_suffix),
        pool_suffix=str(defaults_section.get("pool_suffix") or base.pool_suffix),
    )
    out_suffix = str(defaults_section.get("out_suffix") or WorkspaceDefaults.out_suffix)
    header = bool(defaults_section.get("header", WorkspaceDefaults.header))
    return WorkspaceDefaults(options=options, out_suffix=out_suffix, header=header)


def _parse_sources(
    data: Dict[str, Any],
    defaults: WorkspaceDefaults,
    root: Path,
) -> Dict[str, SourceConfig]:
    sources_section = data.get("sources") or {}
    sources: Dict[str, SourceConfig] = {}
    for name, raw in sources_section.items():
        if isinstance(raw, str):
            raw = {"file": raw}
        if not isinstance(raw, dict):
            logger.warning("Ignoring source %r: expected a table, got %s", name, type(raw).__name__)
            continue
        file_path = Path(raw.get("file") or f"{name}.py")
        if not file_path.is_absolute():
            file_path = (root / file_path).resolve()
        out_raw = raw.get("out")
        if out_raw:
            out_path = Path(out_raw)
            if not out_path.is_absolute():
                out_path = (root / out_path).resolve()
        else:
            out_path = default_out_path(file_path, defaults.out_suffix)
        if out_path == file_path:
            raise ValueError(f"Source '{name}' would overwrite its own input {file_path}")
        sources[name] = SourceConfig(name=name, file=file_path, out=out_path)
    return sources


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_FILENAMES:
        path = root / candidate
        if path.exists():
            return path
    pyproject = root / "pyproject.toml"
    if pyproject.exists() and _pyproject_table(pyproject) is not None:
        return pyproject
    return None


def load_workspace_config(root: Path, explicit: Optional[Path] = None) -> WorkspaceConfig:
    root = root.resolve()
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        return WorkspaceConfig(root=root, defaults=WorkspaceDefaults())

    if config_path.name == "pyproject.toml":
        data = _pyproject_table(config_path) or {}
    elif config_path.suffix == ".toml":
        data = _read_toml_config(config_path)
    else:
        data = _read_json_config(config_path)
    logger.debug("Loaded workspace config from %s", config_path)

    defaults = _parse_defaults(data)
    sources = _parse_sources(data, defaults, root)

    return WorkspaceConfig(
        root=root,
        defaults=defaults,
        sources=sources,
        path=config_path,
        raw=data,
    )
