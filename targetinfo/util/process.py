# SPDX-License-Identifier: MIT
"""Process invocation helper.

ProcessBuilder accumulates a command line and environment changes, and can
be cloned so that a shared base invocation is never mutated in place:

    base = ProcessBuilder("rustc").arg("-").env_remove("RUST_LOG")
    probe = base.clone().args(["--print=cfg"])
    output = probe.exec_with_output()
"""

from __future__ import annotations

import copy
import logging
import os
import shlex
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from targetinfo.core.errors import ProcessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessOutput:
    """Result of a successful process run.

    Attributes:
        status: Exit code (always 0 for outputs returned by exec_with_output).
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    status: int
    stdout: bytes
    stderr: bytes


class ProcessBuilder:
    """A command line plus environment, ready to be executed.

    Environment overrides map a variable to a value, or to None to remove it
    from the inherited environment.
    """

    def __init__(self, program: str | Path) -> None:
        self.program = str(program)
        self._args: list[str] = []
        self._env: dict[str, str | None] = {}
        self._cwd: Path | None = None

    @property
    def arguments(self) -> list[str]:
        return list(self._args)

    @property
    def env_overrides(self) -> dict[str, str | None]:
        return dict(self._env)

    def arg(self, arg: str | Path) -> ProcessBuilder:
        self._args.append(str(arg))
        return self

    def args(self, args: Iterable[str | Path]) -> ProcessBuilder:
        self._args.extend(str(a) for a in args)
        return self

    def env(self, key: str, value: str) -> ProcessBuilder:
        self._env[key] = value
        return self

    def env_remove(self, key: str) -> ProcessBuilder:
        self._env[key] = None
        return self

    def cwd(self, path: str | Path) -> ProcessBuilder:
        self._cwd = Path(path)
        return self

    def clone(self) -> ProcessBuilder:
        """Return an independent copy; changes to it do not affect self."""
        return copy.deepcopy(self)

    def command(self) -> list[str]:
        """The full argv, program first."""
        return [self.program, *self._args]

    def build_env(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """Apply the overrides to ``base`` (default: os.environ)."""
        env = dict(os.environ if base is None else base)
        for key, value in self._env.items():
            if value is None:
                env.pop(key, None)
            else:
                env[key] = value
        return env

    def exec_with_output(self) -> ProcessOutput:
        """Run the command, capturing stdout and stderr.

        Raises:
            ProcessError: If the process could not be started or exited
                with a non-zero status.
        """
        logger.debug("Running: %s", self)
        try:
            result = subprocess.run(
                self.command(),
                env=self.build_env(),
                cwd=self._cwd,
                capture_output=True,
            )
        except OSError as e:
            raise ProcessError(
                f"could not execute process `{self}`: {e}", command=str(self)
            ) from e

        if result.returncode != 0:
            message = (
                f"process didn't exit successfully: `{self}` "
                f"(exit code: {result.returncode})"
            )
            stdout = result.stdout.decode("utf-8", errors="replace").strip()
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            if stdout:
                message += f"\n--- stdout\n{stdout}"
            if stderr:
                message += f"\n--- stderr\n{stderr}"
            raise ProcessError(
                message,
                command=str(self),
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        return ProcessOutput(result.returncode, result.stdout, result.stderr)

    def __str__(self) -> str:
        return shlex.join(self.command())

    def __repr__(self) -> str:
        return f"ProcessBuilder({self.command()!r})"
