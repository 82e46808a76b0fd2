# SPDX-License-Identifier: MIT
"""File descriptors for the artifacts of one crate type.

The toolchain reports a single prefix/suffix per crate type. Some platforms
produce companion files next to that base artifact, and the planner adds
descriptors for them:

- ``*-pc-windows-msvc`` dylibs get an import library (``foo.dll.lib``).
- ``wasm32-*`` binaries linked to ``.js`` get a ``.wasm`` file whose name
  has hyphens replaced.
- Binaries get their debug info: ``.dSYM`` on Apple, ``.pdb`` on MSVC.
  Tests and examples are skipped: tests run from the deps directory and
  examples already have their symbols next to them.
"""

from __future__ import annotations

from dataclasses import dataclass

from targetinfo.core.kinds import TargetFileType, TargetKind
from targetinfo.core.parse import NamingInfo


@dataclass(frozen=True)
class FileType:
    """One file produced for a crate type.

    Attributes:
        suffix: File name suffix, including the dot (e.g. ``.rlib``).
        prefix: File name prefix (e.g. ``lib``).
        target_file_type: Role of the file.
        should_replace_hyphens: Whether hyphens in the crate name must be
            replaced with underscores in this file's name.
    """

    suffix: str
    prefix: str
    target_file_type: TargetFileType
    should_replace_hyphens: bool = False

    def filename(self, stem: str) -> str:
        """File name for a crate whose name is ``stem``."""
        if self.should_replace_hyphens:
            stem = stem.replace("-", "_")
        return f"{self.prefix}{stem}{self.suffix}"


def plan_file_types(
    crate_type: str,
    naming: NamingInfo,
    file_type: TargetFileType,
    kind: TargetKind,
    target_triple: str,
) -> list[FileType] | None:
    """Expand naming info into the files produced for ``crate_type``.

    Args:
        crate_type: Crate type being built (e.g. ``bin``, ``dylib``).
        naming: Prefix and suffix reported by the toolchain, or None.
        file_type: Role of the base artifact.
        kind: Role of the unit producing it.
        target_triple: Triple the artifact is built for.

    Returns:
        None if the crate type is unsupported, otherwise the base file
        followed by any platform-specific companions.
    """
    if naming is None:
        return None
    prefix, suffix = naming
    ret = [FileType(suffix, prefix, file_type)]

    if (
        target_triple.endswith("pc-windows-msvc")
        and crate_type.endswith("dylib")
        and suffix == ".dll"
    ):
        ret.append(FileType(".dll.lib", prefix, TargetFileType.NORMAL))

    if target_triple.startswith("wasm32-") and crate_type == "bin" and suffix == ".js":
        ret.append(
            FileType(
                ".wasm", prefix, TargetFileType.NORMAL, should_replace_hyphens=True
            )
        )

    if kind is TargetKind.BIN:
        if "-apple-" in target_triple:
            ret.append(FileType(".dSYM", prefix, TargetFileType.DEBUG_INFO))
        elif target_triple.endswith("-msvc"):
            ret.append(FileType(".pdb", prefix, TargetFileType.DEBUG_INFO))

    return ret
