# SPDX-License-Identifier: MIT
"""Tests for targetinfo.core.parse."""

import pytest

from targetinfo.core.errors import MalformedOutputError
from targetinfo.core.parse import (
    classify,
    is_unsupported,
    parse_crate_type,
    parse_crate_types,
    split_file_name,
)

DYLIB_WARNING = (
    "warning: dropping unsupported crate type `dylib` for target "
    "`wasm32-unknown-unknown`"
)


class TestIsUnsupported:
    def test_unsupported_marker(self):
        assert is_unsupported("dylib", DYLIB_WARNING)

    def test_unknown_marker(self):
        assert is_unsupported("bogus", "error: unknown crate type: `bogus`")

    def test_other_crate_type_not_affected(self):
        assert not is_unsupported("rlib", DYLIB_WARNING)

    def test_whole_token_only(self):
        """A cdylib diagnostic must not reject dylib, and vice versa."""
        stderr = "warning: dropping unsupported crate type `cdylib` for target `x`"
        assert is_unsupported("cdylib", stderr)
        assert not is_unsupported("dylib", stderr)
        assert not is_unsupported("cdylib", DYLIB_WARNING)

    def test_hyphenated_name(self):
        stderr = "warning: dropping unsupported crate type `proc-macro` for target"
        assert is_unsupported("proc-macro", stderr)

    def test_name_without_marker(self):
        assert not is_unsupported("dylib", "note: building dylib for target")

    def test_marker_on_different_line(self):
        stderr = "warning: unsupported crate type\nnote: dylib is fine"
        assert not is_unsupported("dylib", stderr)

    def test_empty_stderr(self):
        assert not is_unsupported("bin", "")


class TestClassify:
    def test_preserves_order(self):
        result = classify(["bin", "dylib", "rlib"], DYLIB_WARNING)
        assert result == [("bin", True), ("dylib", False), ("rlib", True)]


class TestSplitFileName:
    def test_prefix_and_suffix(self):
        assert split_file_name("rlib", "lib___.rlib") == ("lib", ".rlib")

    def test_empty_prefix_and_suffix(self):
        assert split_file_name("bin", "___") == ("", "")

    def test_surrounding_whitespace_stripped(self):
        assert split_file_name("bin", "  ___.exe\r") == ("", ".exe")

    def test_extra_parts_ignored(self):
        assert split_file_name("bin", "a___b___c") == ("a", "b")

    def test_missing_separator(self):
        with pytest.raises(MalformedOutputError, match="has changed") as exc_info:
            split_file_name("rlib", "librust.rlib")
        assert exc_info.value.crate_type == "rlib"


class TestParseCrateType:
    def test_consumes_one_line(self):
        lines = iter(["lib___.rlib", "next"])
        assert parse_crate_type("rlib", "", lines) == ("lib", ".rlib")
        assert next(lines) == "next"

    def test_unsupported_does_not_consume(self):
        lines = iter(["lib___.rlib"])
        assert parse_crate_type("dylib", DYLIB_WARNING, lines) is None
        assert next(lines) == "lib___.rlib"

    def test_missing_line(self):
        with pytest.raises(MalformedOutputError, match="crate-type rlib"):
            parse_crate_type("rlib", "", iter([]))


class TestParseCrateTypes:
    def test_unsupported_in_middle_keeps_alignment(self):
        lines = iter(["___", "lib___.rlib", "lib___.a", "/sysroot"])
        crate_types = ["bin", "dylib", "rlib", "staticlib"]
        result = parse_crate_types(crate_types, DYLIB_WARNING, lines)
        assert result == {
            "bin": ("", ""),
            "dylib": None,
            "rlib": ("lib", ".rlib"),
            "staticlib": ("lib", ".a"),
        }
        assert next(lines) == "/sysroot"

    def test_result_independent_of_batch(self):
        alone = parse_crate_types(["rlib"], "", iter(["lib___.rlib"]))
        batched = parse_crate_types(
            ["bin", "rlib", "staticlib"], "", iter(["___", "lib___.rlib", "lib___.a"])
        )
        assert alone["rlib"] == batched["rlib"] == ("lib", ".rlib")

    def test_too_few_lines(self):
        with pytest.raises(MalformedOutputError) as exc_info:
            parse_crate_types(["bin", "rlib"], "", iter(["___"]))
        assert exc_info.value.crate_type == "rlib"
