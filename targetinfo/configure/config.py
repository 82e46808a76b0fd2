# SPDX-License-Identifier: MIT
"""Configuration for targetinfo.

Config reads ``.cargo/config.toml`` files from the working directory, each
of its ancestors and ``$CARGO_HOME``, and overlays the process environment
for the few values that can come from either place.

Example:
    config = Config.load(Path.cwd())
    rustc = config.rustc_path() or "rustc"
    flags = config.get_list_or_split_string("build.rustflags")
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from targetinfo.core.errors import ConfigError

CONFIG_DIR = ".cargo"
# Preferred name first; the legacy name is only read if the first is absent.
CONFIG_NAMES = ("config.toml", "config")


@dataclass
class BuildConfig:
    """What the build is for.

    Attributes:
        host_triple: Triple of the machine running the build.
        requested_target: Triple passed with --target, if any.
    """

    host_triple: str
    requested_target: str | None = None

    def target_triple(self) -> str:
        return self.requested_target or self.host_triple

    @property
    def is_cross(self) -> bool:
        return self.requested_target is not None


class Config:
    """Merged configuration values plus the environment.

    Attributes:
        env: Environment used for overrides (defaults to os.environ).
        paths: Config files that were loaded, closest first.
    """

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        *,
        env: Mapping[str, str] | None = None,
        paths: list[Path] | None = None,
    ) -> None:
        self._values: dict[str, Any] = dict(values or {})
        self.env: dict[str, str] = dict(os.environ if env is None else env)
        self.paths = list(paths or [])

    @classmethod
    def from_dict(
        cls, values: Mapping[str, Any], env: Mapping[str, str] | None = None
    ) -> Config:
        """Create an in-memory configuration."""
        return cls(values, env={} if env is None else env)

    @classmethod
    def load(
        cls, cwd: Path | str | None = None, env: Mapping[str, str] | None = None
    ) -> Config:
        """Discover and merge config files for ``cwd``.

        Files closer to ``cwd`` take precedence for scalar values; tables
        are merged and arrays are concatenated, closest first.

        Raises:
            ConfigError: If a config file cannot be read or parsed.
        """
        env = dict(os.environ if env is None else env)
        cwd = Path.cwd() if cwd is None else Path(cwd)

        paths: list[Path] = []
        config_dirs = [d / CONFIG_DIR for d in (cwd, *cwd.parents)]
        config_dirs.append(_cargo_home(env))
        for directory in config_dirs:
            path = _config_file(directory)
            if path is not None and path not in paths:
                paths.append(path)

        values: dict[str, Any] = {}
        for path in paths:
            values = _merge(values, _read_toml(path))
        return cls(values, env=env, paths=paths)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key (e.g. ``build.rustflags``)."""
        node: Any = self._values
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_string(self, key: str) -> str | None:
        value = self.get(key)
        if value is None or isinstance(value, str):
            return value
        raise ConfigError(
            f"expected a string for `{key}`, found {_type_name(value)}", key
        )

    def get_table(self, key: str) -> dict[str, Any] | None:
        value = self.get(key)
        if value is None or isinstance(value, dict):
            return value
        raise ConfigError(
            f"expected a table for `{key}`, found {_type_name(value)}", key
        )

    def get_list_or_split_string(self, key: str) -> list[str] | None:
        """Return a list value, or a string value split on whitespace."""
        return list_or_split_string(self.get(key), key)

    def env_var(self, name: str) -> str | None:
        return self.env.get(name)

    def rustc_path(self) -> str | None:
        """Compiler from ``RUSTC`` or ``build.rustc``."""
        return self.env_var("RUSTC") or self.get_string("build.rustc")

    def rustc_wrapper(self) -> str | None:
        """Wrapper from ``RUSTC_WRAPPER`` or ``build.rustc-wrapper``.

        An empty value disables the wrapper.
        """
        wrapper = self.env_var("RUSTC_WRAPPER")
        if wrapper is None:
            wrapper = self.get_string("build.rustc-wrapper")
        return wrapper or None

    def requested_target(self) -> str | None:
        """Target from ``CARGO_BUILD_TARGET`` or ``build.target``."""
        return self.env_var("CARGO_BUILD_TARGET") or self.get_string("build.target")

    def __repr__(self) -> str:
        return f"Config(paths={[str(p) for p in self.paths]})"


def list_or_split_string(value: Any, key: str) -> list[str] | None:
    """Normalize a list-of-strings or whitespace-separated string value."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.split()
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigError(
        f"expected a list or a string for `{key}`, found {_type_name(value)}", key
    )


def _cargo_home(env: Mapping[str, str]) -> Path:
    home = env.get("CARGO_HOME")
    if home:
        return Path(home)
    return Path.home() / CONFIG_DIR


def _config_file(directory: Path) -> Path | None:
    for name in CONFIG_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        raise ConfigError(f"could not load config file {path}: {e}") from e


def _merge(closer: dict[str, Any], farther: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(closer)
    for key, value in farther.items():
        if key not in result:
            result[key] = value
        elif isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge(result[key], value)
        elif isinstance(result[key], list) and isinstance(value, list):
            result[key] = [*result[key], *value]
    return result


def _type_name(value: Any) -> str:
    if isinstance(value, dict):
        return "a table"
    if isinstance(value, list):
        return "an array"
    if isinstance(value, bool):
        return "a boolean"
    if isinstance(value, int | float):
        return "a number"
    return type(value).__name__
