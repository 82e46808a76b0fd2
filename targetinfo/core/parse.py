# SPDX-License-Identifier: MIT
"""Parsing of ``rustc --print=file-names`` output.

The probe compiles a synthetic crate named ``___`` from stdin, so every
printed file name has the form ``<prefix>___<suffix>``, one line per
requested crate type, in request order. Crate types the toolchain rejects
for the target are reported on stderr instead and print no line, so they
must be classified before stdout lines are consumed.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence

from targetinfo.core.errors import MalformedOutputError

# Crate name passed to the toolchain; doubles as the prefix/suffix separator.
SEPARATOR = "___"

# Prefix and suffix, or None when the crate type is unsupported.
NamingInfo = tuple[str, str] | None

# Diagnostics the toolchain prints for rejected crate types.
UNSUPPORTED_MARKERS = ("unsupported crate type", "unknown crate type")


def is_unsupported(crate_type: str, stderr: str) -> bool:
    """Return True if ``stderr`` reports ``crate_type`` as unsupported.

    The crate type must appear as a whole token, so a diagnostic about
    ``cdylib`` does not also reject ``dylib``.
    """
    name = re.compile(rf"(?<![\w-]){re.escape(crate_type)}(?![\w-])")
    return any(
        any(marker in line for marker in UNSUPPORTED_MARKERS) and name.search(line)
        for line in stderr.splitlines()
    )


def classify(crate_types: Sequence[str], stderr: str) -> list[tuple[str, bool]]:
    """Pair each crate type with whether a stdout line is expected for it.

    Request order is preserved.
    """
    return [(ct, not is_unsupported(ct, stderr)) for ct in crate_types]


def split_file_name(crate_type: str, line: str) -> tuple[str, str]:
    """Split a printed file name into (prefix, suffix).

    Anything after a second separator is ignored.

    Raises:
        MalformedOutputError: If the line has no separator.
    """
    parts = line.strip().split(SEPARATOR)
    if len(parts) < 2:
        raise MalformedOutputError(
            "output of --print=file-names has changed in the compiler, "
            f"cannot parse: {line!r}",
            crate_type,
        )
    return parts[0], parts[1]


def parse_crate_type(
    crate_type: str, stderr: str, lines: Iterator[str]
) -> NamingInfo:
    """Compute the file prefix and suffix for one crate type.

    For a library like ``libcargo.rlib``, prefix is ``lib`` and suffix is
    ``.rlib``. Returns None if the crate type is not supported.

    The caller must ensure ``lines`` is positioned at the line for this
    crate type. Only one file per crate type is supported.

    Raises:
        MalformedOutputError: If no line is left or it cannot be split.
    """
    if is_unsupported(crate_type, stderr):
        return None
    return split_file_name(crate_type, _take_line(crate_type, lines))


def parse_crate_types(
    crate_types: Sequence[str], stderr: str, lines: Iterator[str]
) -> dict[str, NamingInfo]:
    """Parse naming info for several crate types from one probe.

    Consumes exactly one line from ``lines`` per supported crate type,
    leaving the iterator positioned after the last of them.
    """
    result: dict[str, NamingInfo] = {}
    for crate_type, expects_line in classify(crate_types, stderr):
        if not expects_line:
            result[crate_type] = None
            continue
        line = _take_line(crate_type, lines)
        result[crate_type] = split_file_name(crate_type, line)
    return result


def _take_line(crate_type: str, lines: Iterator[str]) -> str:
    line = next(lines, None)
    if line is None:
        raise MalformedOutputError(
            "malformed output when learning about "
            f"crate-type {crate_type} information",
            crate_type,
        )
    return line
