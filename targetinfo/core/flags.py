# SPDX-License-Identifier: MIT
"""Extra compiler flags from the environment and configuration.

Flags such as RUSTFLAGS should only reach compilations for the requested
target architecture, not build scripts and plugins that may run on an
entirely different host. Telling those apart is hard, so:

1. Without --target, the flags apply to every compilation; they all share
   one target.
2. With --target, the flags apply only to TARGET compilations.
"""

from __future__ import annotations

from collections.abc import Sequence

from targetinfo.configure.config import BuildConfig, Config, list_or_split_string
from targetinfo.core.cfg import Cfg, matches, parse_cfg_expr
from targetinfo.core.errors import CfgParseError
from targetinfo.core.kinds import CompileKind


def extra_flags(
    config: Config,
    build_config: BuildConfig,
    kind: CompileKind,
    target_cfg: Sequence[Cfg] | None = None,
    name: str = "RUSTFLAGS",
) -> list[str]:
    """Resolve extra toolchain flags for one compile kind.

    Sources, first match wins:
        1. Environment variable ``name`` (split on spaces).
        2. ``target.<triple>.<name>`` plus every ``target.'cfg(...)'.<name>``
           whose expression matches ``target_cfg``.
        3. ``build.<name>``.

    Args:
        config: Configuration and environment.
        build_config: Host triple and requested target.
        kind: Compile kind the flags are for.
        target_cfg: Active cfg for the target, if known.
        name: Environment variable name (e.g. ``RUSTFLAGS``).

    Returns:
        The flags, possibly empty.
    """
    if build_config.is_cross and kind is not CompileKind.TARGET:
        return []

    value = config.env_var(name)
    if value is not None:
        return [arg.strip() for arg in value.split(" ") if arg.strip()]

    key_name = name.lower()
    flags: list[str] = []

    table = config.get_table("target") or {}
    flags.extend(_section_flags(table, build_config.target_triple(), key_name))

    if target_cfg is not None:
        # Several [target.'cfg(..)'] sections may match; sort for stable flags.
        for key in sorted(_matching_cfg_keys(table, target_cfg)):
            flags.extend(_section_flags(table, key, key_name))

    if flags:
        return flags

    return config.get_list_or_split_string(f"build.{key_name}") or []


def _matching_cfg_keys(table: dict, target_cfg: Sequence[Cfg]) -> list[str]:
    keys = []
    for key in table:
        if not (key.startswith("cfg(") and key.endswith(")")):
            continue
        try:
            expr = parse_cfg_expr(key[4:-1])
        except CfgParseError:
            continue
        if matches(expr, target_cfg):
            keys.append(key)
    return keys


def _section_flags(table: dict, section: str, key_name: str) -> list[str]:
    values = table.get(section)
    if not isinstance(values, dict):
        return []
    key = f"target.{section}.{key_name}"
    return list_or_split_string(values.get(key_name), key) or []
