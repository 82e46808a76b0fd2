# SPDX-License-Identifier: MIT
"""Custom exceptions for targetinfo.

All targetinfo exceptions inherit from TargetInfoError. Unsupported crate
types are not errors: they are reported as ``None`` naming info.
"""

from __future__ import annotations


class TargetInfoError(Exception):
    """Base class for all targetinfo exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ProcessError(TargetInfoError):
    """An external process could not be started or exited unsuccessfully.

    Attributes:
        command: The rendered command line.
        returncode: Exit code, or None if the process never started.
        stdout: Captured standard output (bytes).
        stderr: Captured standard error (bytes).
    """

    def __init__(
        self,
        message: str,
        *,
        command: str,
        returncode: int | None = None,
        stdout: bytes = b"",
        stderr: bytes = b"",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


class ToolNotFoundError(TargetInfoError):
    """Required tool was not found.

    Attributes:
        tool: The name of the tool that was not found.
    """

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"tool not found: {tool}")


class ToolInvocationError(TargetInfoError):
    """The toolchain could not be run to learn target information.

    The underlying ProcessError is available as ``__cause__``.
    """


class MalformedOutputError(TargetInfoError):
    """Toolchain output did not have the expected shape.

    Attributes:
        crate_type: The crate type being parsed, if any.
    """

    def __init__(self, message: str, crate_type: str | None = None) -> None:
        self.crate_type = crate_type
        super().__init__(message)


class CfgParseError(TargetInfoError):
    """A cfg value or cfg expression could not be parsed.

    Attributes:
        source: The text that failed to parse.
    """

    def __init__(self, message: str, source: str) -> None:
        self.source = source
        super().__init__(message)


class ConfigError(TargetInfoError):
    """Configuration could not be read or had the wrong type.

    Attributes:
        key: The dotted configuration key, if any.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)
