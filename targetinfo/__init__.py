# SPDX-License-Identifier: MIT
"""
targetinfo: learn target-specific information from the Rust compiler.

Given a compiler and a target, targetinfo predicts the file names each crate
type will produce (including platform companions such as import libraries
and debug info), reports the active cfg predicates, and locates the sysroot
library directory.
"""

from __future__ import annotations

from targetinfo.configure.config import BuildConfig, Config
from targetinfo.core.cfg import Cfg, matches, parse_cfg_expr
from targetinfo.core.errors import TargetInfoError
from targetinfo.core.file_types import FileType
from targetinfo.core.kinds import CompileKind, TargetFileType, TargetKind
from targetinfo.core.target_info import TargetInfo
from targetinfo.tools.rustc import Rustc

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration
    "BuildConfig",
    "Config",
    # Resolver
    "TargetInfo",
    "FileType",
    "CompileKind",
    "TargetFileType",
    "TargetKind",
    # cfg predicates
    "Cfg",
    "matches",
    "parse_cfg_expr",
    # Tools
    "Rustc",
    # Errors
    "TargetInfoError",
]
