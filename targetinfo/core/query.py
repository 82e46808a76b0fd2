# SPDX-License-Identifier: MIT
"""Toolchain probes for target-specific information.

Three probes are built from one base invocation:

- Combined: file names for every known crate type plus ``--print=sysroot``
  and ``--print=cfg``, run once when a TargetInfo is created.
- Fallback: the same without the sysroot/cfg prints, used when the
  combined probe fails. Sysroot and cfg then stay unknown.
- Focused: the file name for a single crate type, used for crate types
  that were not part of the combined probe.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from targetinfo.core.cfg import Cfg
from targetinfo.core.errors import (
    MalformedOutputError,
    ProcessError,
    ToolInvocationError,
)
from targetinfo.core.kinds import CompileKind
from targetinfo.core.parse import (
    SEPARATOR,
    NamingInfo,
    parse_crate_type,
    parse_crate_types,
)
from targetinfo.util.process import ProcessBuilder, ProcessOutput

logger = logging.getLogger(__name__)

KNOWN_CRATE_TYPES: tuple[str, ...] = (
    "bin",
    "rlib",
    "dylib",
    "cdylib",
    "staticlib",
    "proc-macro",
)


@dataclass
class ProbeResult:
    """Everything learned from the construction-time probe.

    Attributes:
        crate_types: Naming info for each probed crate type.
        sysroot_libdir: Standard library directory, None if unknown.
        cfg: Active cfg predicates in toolchain order, None if unknown.
    """

    crate_types: dict[str, NamingInfo] = field(default_factory=dict)
    sysroot_libdir: Path | None = None
    cfg: list[Cfg] | None = None


def _is_windows_host() -> bool:
    return sys.platform == "win32"


def sysroot_libdir(sysroot: str, kind: CompileKind, target_triple: str) -> Path:
    """Directory holding the standard library for ``kind``.

    For the host this is where the toolchain's own runtime lives; for a
    cross target it is the per-target rustlib directory.
    """
    path = Path(sysroot)
    if kind is CompileKind.HOST:
        return path / ("bin" if _is_windows_host() else "lib")
    return path / "lib" / "rustlib" / target_triple / "lib"


class ToolchainQuery:
    """Builds and runs toolchain probes for one compile kind.

    Args:
        process: Base invocation of the compiler (cloned, never mutated).
        kind: Whether probes describe the host or the requested target.
        target_triple: Triple passed with ``--target`` for TARGET probes,
            and used to locate the cross sysroot.
        rustflags: Extra flags appended to every probe.
    """

    def __init__(
        self,
        process: ProcessBuilder,
        kind: CompileKind,
        target_triple: str,
        rustflags: Sequence[str] = (),
    ) -> None:
        self.kind = kind
        self.target_triple = target_triple
        base = process.clone()
        base.arg("-").args(["--crate-name", SEPARATOR, "--print=file-names"])
        base.args(rustflags).env_remove("RUST_LOG")
        if kind is CompileKind.TARGET:
            base.args(["--target", target_triple])
        self._template = base

    def template(self) -> ProcessBuilder:
        """A fresh copy of the base file-names invocation."""
        return self._template.clone()

    def file_names_process(self, crate_types: Sequence[str]) -> ProcessBuilder:
        process = self.template()
        for crate_type in crate_types:
            process.args(["--crate-type", crate_type])
        return process

    def probe(self, crate_types: Sequence[str] = KNOWN_CRATE_TYPES) -> ProbeResult:
        """Run the combined probe, falling back to the reduced one.

        Raises:
            ToolInvocationError: If even the reduced probe fails.
            MalformedOutputError: If the output is missing expected lines.
            CfgParseError: If a cfg line cannot be parsed.
        """
        process = self.file_names_process(crate_types)
        with_cfg = process.clone().args(["--print=sysroot", "--print=cfg"])

        has_cfg_and_sysroot = True
        try:
            output = with_cfg.exec_with_output()
        except ProcessError as e:
            logger.debug(
                "Combined probe failed, retrying without sysroot/cfg: %s", e.message
            )
            has_cfg_and_sysroot = False
            try:
                output = process.exec_with_output()
            except ProcessError as e2:
                raise ToolInvocationError(
                    "failed to run `rustc` to learn about target-specific information"
                ) from e2

        stderr, lines = _decode(output)
        result = ProbeResult(crate_types=parse_crate_types(crate_types, stderr, lines))
        if not has_cfg_and_sysroot:
            return result

        sysroot = next(lines, None)
        if sysroot is None:
            raise MalformedOutputError(
                "output of --print=sysroot missing when learning about "
                "target-specific information from rustc"
            )
        result.sysroot_libdir = sysroot_libdir(sysroot, self.kind, self.target_triple)
        result.cfg = [Cfg.parse(line) for line in lines]
        return result

    def probe_crate_type(self, crate_type: str) -> NamingInfo:
        """Run the focused probe for a single crate type.

        Raises:
            ToolInvocationError: If the toolchain cannot be run.
            MalformedOutputError: If the output cannot be parsed.
        """
        logger.debug("Probing crate-type %s", crate_type)
        process = self.file_names_process([crate_type])
        try:
            output = process.exec_with_output()
        except ProcessError as e:
            raise ToolInvocationError(
                "failed to run `rustc` to learn about "
                f"crate-type {crate_type} information"
            ) from e
        stderr, lines = _decode(output)
        return parse_crate_type(crate_type, stderr, lines)


def _decode(output: ProcessOutput) -> tuple[str, Iterator[str]]:
    stderr = output.stderr.decode("utf-8")
    stdout = output.stdout.decode("utf-8")
    return stderr, iter(stdout.splitlines())
