# SPDX-License-Identifier: MIT
"""The rustc compiler tool.

Rustc locates the compiler, learns its version and host triple from
``rustc -vV`` and hands out invocation templates for probes.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from targetinfo.configure.config import Config
from targetinfo.core.errors import MalformedOutputError, ToolNotFoundError
from targetinfo.util.process import ProcessBuilder

logger = logging.getLogger(__name__)


@dataclass
class Rustc:
    """A located compiler.

    Attributes:
        path: Compiler executable.
        verbose_version: Output of ``rustc -vV``.
        host: Host triple reported by the compiler.
        wrapper: Optional program that runs the compiler (e.g. sccache).
    """

    path: Path
    verbose_version: str
    host: str
    wrapper: Path | None = None

    @classmethod
    def find(cls, config: Config) -> Rustc:
        """Locate rustc from config/environment or PATH and query it.

        Raises:
            ToolNotFoundError: If no compiler can be found.
            ProcessError: If ``rustc -vV`` fails.
            MalformedOutputError: If the version output has no host line.
        """
        name = config.rustc_path() or "rustc"
        found = shutil.which(name)
        if found is None:
            raise ToolNotFoundError(name)
        path = Path(found)

        wrapper_name = config.rustc_wrapper()
        wrapper: Path | None = None
        if wrapper_name is not None:
            found_wrapper = shutil.which(wrapper_name)
            if found_wrapper is None:
                raise ToolNotFoundError(wrapper_name)
            wrapper = Path(found_wrapper)

        output = ProcessBuilder(path).arg("-vV").exec_with_output()
        verbose_version = output.stdout.decode("utf-8")
        host = parse_host(verbose_version)
        logger.debug("Found rustc at %s (host %s)", path, host)
        return cls(path, verbose_version, host, wrapper)

    @property
    def release(self) -> str | None:
        """Release version (e.g. ``1.75.0``), if reported."""
        return _field(self.verbose_version, "release")

    def process(self) -> ProcessBuilder:
        """A new invocation of the compiler, through the wrapper if any."""
        if self.wrapper is not None:
            return ProcessBuilder(self.wrapper).arg(self.path)
        return ProcessBuilder(self.path)


def parse_host(verbose_version: str) -> str:
    """Extract the host triple from ``rustc -vV`` output.

    Raises:
        MalformedOutputError: If there is no ``host:`` line.
    """
    host = _field(verbose_version, "host")
    if host is None:
        raise MalformedOutputError("rustc -v didn't have a line for `host:`")
    return host


def _field(verbose_version: str, name: str) -> str | None:
    prefix = f"{name}: "
    for line in verbose_version.splitlines():
        if line.startswith(prefix):
            return line[len(prefix) :].strip()
    return None
