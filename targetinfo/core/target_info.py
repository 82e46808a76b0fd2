# SPDX-License-Identifier: MIT
"""Target-specific information learned from the compiler.

One TargetInfo exists per compile kind (host, and the requested target when
cross compiling). It is created by a single combined probe and afterwards
answers, without further toolchain runs:

- which prefix/suffix each crate type produces,
- the active cfg predicates,
- where the standard library for the target lives.

Crate types outside the initial probe are learned lazily with a focused
probe the first time they are asked for, and cached from then on.

Example:
    config = Config.load()
    rustc = Rustc.find(config)
    build_config = BuildConfig(rustc.host, config.requested_target())
    info = TargetInfo.new(rustc, build_config, config, CompileKind.TARGET)
    for ft in info.file_types(
        "dylib", TargetFileType.LINKABLE, TargetKind.LIB, "x86_64-pc-windows-msvc"
    ) or []:
        print(ft.filename("my-crate"))
"""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from targetinfo.configure.config import BuildConfig, Config
from targetinfo.core.cfg import Cfg
from targetinfo.core.errors import TargetInfoError
from targetinfo.core.file_types import FileType, plan_file_types
from targetinfo.core.flags import extra_flags
from targetinfo.core.kinds import CompileKind, TargetFileType, TargetKind
from targetinfo.core.parse import NamingInfo
from targetinfo.core.query import KNOWN_CRATE_TYPES, ToolchainQuery
from targetinfo.tools.rustc import Rustc
from targetinfo.util.process import ProcessBuilder

# Distinguishes "not cached" from a cached None (unsupported).
_MISSING = object()


class TargetInfo:
    """Compiler facts for one compile kind.

    Attributes:
        sysroot_libdir: Standard library directory, None if unknown.
    """

    def __init__(
        self,
        *,
        query: ToolchainQuery | None = None,
        crate_types: Mapping[str, NamingInfo] | None = None,
        cfg: Sequence[Cfg] | None = None,
        sysroot_libdir: Path | None = None,
    ) -> None:
        """Create from already-known parts.

        Args:
            query: Used for focused probes of uncached crate types.
            crate_types: Naming info known up front.
            cfg: Active cfg predicates, None if unknown.
            sysroot_libdir: Standard library directory, None if unknown.
        """
        self._query = query
        self._crate_types: dict[str, NamingInfo] = dict(crate_types or {})
        self._lock = threading.Lock()
        self._cfg = tuple(cfg) if cfg is not None else None
        self.sysroot_libdir = sysroot_libdir

    @classmethod
    def probe(
        cls,
        process: ProcessBuilder,
        kind: CompileKind,
        target_triple: str,
        rustflags: Sequence[str] = (),
    ) -> TargetInfo:
        """Run the combined probe with an explicit compiler invocation.

        Raises:
            ToolInvocationError: If the compiler cannot be run.
            MalformedOutputError: If its output cannot be parsed.
            CfgParseError: If a cfg line cannot be parsed.
        """
        query = ToolchainQuery(process, kind, target_triple, rustflags)
        result = query.probe(KNOWN_CRATE_TYPES)
        return cls(
            query=query,
            crate_types=result.crate_types,
            cfg=result.cfg,
            sysroot_libdir=result.sysroot_libdir,
        )

    @classmethod
    def new(
        cls,
        rustc: Rustc,
        build_config: BuildConfig,
        config: Config,
        kind: CompileKind,
    ) -> TargetInfo:
        """Probe for ``kind`` using the build's compiler and flags."""
        rustflags = extra_flags(config, build_config, kind)
        if kind is CompileKind.HOST:
            triple = build_config.host_triple
        else:
            triple = build_config.target_triple()
        return cls.probe(rustc.process(), kind, triple, rustflags)

    def cfg(self) -> list[Cfg] | None:
        """Active cfg predicates in compiler order, None if unknown."""
        return list(self._cfg) if self._cfg is not None else None

    def try_get(self, crate_type: str) -> NamingInfo | object:
        """Cached naming info, or a sentinel if ``crate_type`` is uncached."""
        with self._lock:
            return self._crate_types.get(crate_type, _MISSING)

    def insert_if_absent(self, crate_type: str, naming: NamingInfo) -> NamingInfo:
        """Cache ``naming`` unless a value is already present; return the cached one."""
        with self._lock:
            return self._crate_types.setdefault(crate_type, naming)

    def crate_type_info(self, crate_type: str) -> NamingInfo:
        """Prefix and suffix for ``crate_type``, or None if unsupported.

        Raises:
            TargetInfoError: If the crate type is uncached and no compiler
                invocation is available to learn about it.
            ToolInvocationError: If the focused probe cannot run.
            MalformedOutputError: If its output cannot be parsed.
        """
        cached = self.try_get(crate_type)
        if cached is not _MISSING:
            return cached  # type: ignore[return-value]
        if self._query is None:
            raise TargetInfoError(
                f"no compiler available to learn about crate-type {crate_type} "
                "information"
            )
        return self.insert_if_absent(
            crate_type, self._query.probe_crate_type(crate_type)
        )

    def file_types(
        self,
        crate_type: str,
        file_type: TargetFileType,
        kind: TargetKind,
        target_triple: str,
    ) -> list[FileType] | None:
        """Files produced for ``crate_type``; None if it is unsupported."""
        naming = self.crate_type_info(crate_type)
        return plan_file_types(crate_type, naming, file_type, kind, target_triple)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly snapshot of everything currently known."""
        with self._lock:
            crate_types = dict(self._crate_types)
        return {
            "sysroot_libdir": (
                str(self.sysroot_libdir) if self.sysroot_libdir is not None else None
            ),
            "cfg": [str(c) for c in self._cfg] if self._cfg is not None else None,
            "crate_types": {
                name: (
                    {"prefix": naming[0], "suffix": naming[1]}
                    if naming is not None
                    else None
                )
                for name, naming in crate_types.items()
            },
        }

    def __repr__(self) -> str:
        return (
            f"TargetInfo(crate_types={sorted(self._crate_types)}, "
            f"sysroot_libdir={self.sysroot_libdir})"
        )
