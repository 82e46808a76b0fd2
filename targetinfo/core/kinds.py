# SPDX-License-Identifier: MIT
"""Small enumerations shared by the resolver and its callers."""

from __future__ import annotations

from enum import Enum


class CompileKind(Enum):
    """Whether a compilation is for the build host or the requested target."""

    HOST = "host"
    TARGET = "target"


class TargetKind(Enum):
    """Role of the unit whose artifacts are being named."""

    LIB = "lib"
    BIN = "bin"
    TEST = "test"
    BENCH = "bench"
    EXAMPLE_LIB = "example-lib"
    EXAMPLE_BIN = "example-bin"
    CUSTOM_BUILD = "custom-build"


class TargetFileType(Enum):
    """Type of each file generated by a unit."""

    # Not a special file type.
    NORMAL = "normal"
    # Something you can link against (e.g. a library).
    LINKABLE = "linkable"
    # External debug information (e.g. *.dSYM and *.pdb).
    DEBUG_INFO = "debug-info"
