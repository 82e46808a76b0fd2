# SPDX-License-Identifier: MIT
"""Tests for targetinfo.core.file_types."""

from targetinfo.core.file_types import FileType, plan_file_types
from targetinfo.core.kinds import TargetFileType, TargetKind

NORMAL = TargetFileType.NORMAL
LINKABLE = TargetFileType.LINKABLE
DEBUG_INFO = TargetFileType.DEBUG_INFO


class TestPlanFileTypes:
    def test_unsupported(self):
        result = plan_file_types(
            "dylib", None, LINKABLE, TargetKind.LIB, "wasm32-unknown-unknown"
        )
        assert result is None

    def test_msvc_dylib_gets_import_library(self):
        result = plan_file_types(
            "dylib", ("", ".dll"), LINKABLE, TargetKind.LIB, "x86_64-pc-windows-msvc"
        )
        assert result == [
            FileType(".dll", "", LINKABLE),
            FileType(".dll.lib", "", NORMAL),
        ]

    def test_msvc_cdylib_gets_import_library(self):
        result = plan_file_types(
            "cdylib", ("", ".dll"), NORMAL, TargetKind.LIB, "i686-pc-windows-msvc"
        )
        assert result is not None
        assert [ft.suffix for ft in result] == [".dll", ".dll.lib"]

    def test_gnu_windows_dylib_has_no_import_library(self):
        result = plan_file_types(
            "dylib", ("", ".dll"), LINKABLE, TargetKind.LIB, "x86_64-pc-windows-gnu"
        )
        assert result == [FileType(".dll", "", LINKABLE)]

    def test_wasm_js_binary_gets_wasm_companion(self):
        result = plan_file_types(
            "bin", ("", ".js"), NORMAL, TargetKind.TEST, "wasm32-unknown-unknown"
        )
        assert result == [
            FileType(".js", "", NORMAL),
            FileType(".wasm", "", NORMAL, should_replace_hyphens=True),
        ]

    def test_wasm_binary_without_js(self):
        result = plan_file_types(
            "bin", ("", ".wasm"), NORMAL, TargetKind.TEST, "wasm32-unknown-unknown"
        )
        assert result == [FileType(".wasm", "", NORMAL)]

    def test_apple_binary_gets_dsym(self):
        result = plan_file_types(
            "bin", ("", ""), NORMAL, TargetKind.BIN, "x86_64-apple-darwin"
        )
        assert result is not None
        assert result[0] == FileType("", "", NORMAL)
        assert result[-1] == FileType(".dSYM", "", DEBUG_INFO)

    def test_msvc_binary_gets_pdb(self):
        result = plan_file_types(
            "bin", ("", ".exe"), NORMAL, TargetKind.BIN, "x86_64-pc-windows-msvc"
        )
        assert result == [
            FileType(".exe", "", NORMAL),
            FileType(".pdb", "", DEBUG_INFO),
        ]

    def test_tests_and_examples_get_no_debug_info(self):
        for kind in (TargetKind.TEST, TargetKind.EXAMPLE_BIN, TargetKind.BENCH):
            result = plan_file_types(
                "bin", ("", ""), NORMAL, kind, "x86_64-apple-darwin"
            )
            assert result == [FileType("", "", NORMAL)]

    def test_linux_binary(self):
        result = plan_file_types(
            "bin", ("", ""), NORMAL, TargetKind.BIN, "x86_64-unknown-linux-gnu"
        )
        assert result == [FileType("", "", NORMAL)]

    def test_msvc_dylib_bin_role_gets_both(self):
        """Rules are independent; all that apply fire, in order."""
        result = plan_file_types(
            "dylib", ("", ".dll"), LINKABLE, TargetKind.BIN, "x86_64-pc-windows-msvc"
        )
        assert result is not None
        assert [ft.suffix for ft in result] == [".dll", ".dll.lib", ".pdb"]

    def test_staticlib_never_expands(self):
        for triple in (
            "x86_64-pc-windows-msvc",
            "x86_64-apple-darwin",
            "wasm32-unknown-unknown",
            "x86_64-unknown-linux-gnu",
        ):
            result = plan_file_types(
                "staticlib", ("lib", ".a"), LINKABLE, TargetKind.LIB, triple
            )
            assert result == [FileType(".a", "lib", LINKABLE)]


class TestFileTypeFilename:
    def test_filename(self):
        ft = FileType(".rlib", "lib", LINKABLE)
        assert ft.filename("my-crate") == "libmy-crate.rlib"

    def test_replace_hyphens(self):
        ft = FileType(".wasm", "", NORMAL, should_replace_hyphens=True)
        assert ft.filename("my-crate") == "my_crate.wasm"
