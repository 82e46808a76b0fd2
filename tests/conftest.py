# SPDX-License-Identifier: MIT
"""Shared fixtures: a scripted stand-in for the rustc executable."""

from __future__ import annotations

import subprocess

import pytest

LINUX_CRATE_TYPES: dict[str, tuple[str, str] | None] = {
    "bin": ("", ""),
    "rlib": ("lib", ".rlib"),
    "dylib": ("lib", ".so"),
    "cdylib": ("lib", ".so"),
    "staticlib": ("lib", ".a"),
    "proc-macro": ("lib", ".so"),
    "lib": ("lib", ".rlib"),
}

LINUX_CFG = [
    "debug_assertions",
    'target_arch="x86_64"',
    'target_env="gnu"',
    'target_feature="sse2"',
    'target_os="linux"',
    "unix",
]


class FakeRustc:
    """Answers rustc invocations the way the real compiler prints them.

    Attributes:
        crate_types: Naming per crate type; None prints an "unsupported"
            warning on stderr and no stdout line.
        supports_print_cfg: If False, asking for sysroot/cfg fails.
        returncode: Non-zero makes every invocation fail.
        calls: argv of every invocation.
        envs: Environment of every invocation.
    """

    def __init__(self) -> None:
        self.crate_types = dict(LINUX_CRATE_TYPES)
        self.sysroot = "/opt/rust"
        self.cfg = list(LINUX_CFG)
        self.supports_print_cfg = True
        self.host = "x86_64-unknown-linux-gnu"
        self.returncode = 0
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str] | None] = []

    def __call__(self, cmd, env=None, cwd=None, capture_output=False, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        self.envs.append(env)

        if self.returncode:
            return subprocess.CompletedProcess(
                cmd, self.returncode, b"", b"error: could not start\n"
            )

        if "-vV" in cmd:
            stdout = (
                "rustc 1.75.0 (82e1608df 2023-12-21)\n"
                "binary: rustc\n"
                f"host: {self.host}\n"
                "release: 1.75.0\n"
            )
            return subprocess.CompletedProcess(cmd, 0, stdout.encode(), b"")

        if "--print=cfg" in cmd and not self.supports_print_cfg:
            return subprocess.CompletedProcess(
                cmd, 1, b"", b"error: unknown print request `cfg`\n"
            )

        target = cmd[cmd.index("--target") + 1] if "--target" in cmd else self.host
        out: list[str] = []
        err: list[str] = []
        for i, arg in enumerate(cmd):
            if arg != "--crate-type":
                continue
            crate_type = cmd[i + 1]
            naming = self.crate_types.get(crate_type)
            if naming is None:
                err.append(
                    f"warning: dropping unsupported crate type `{crate_type}` "
                    f"for target `{target}`"
                )
            else:
                out.append(f"{naming[0]}___{naming[1]}")
        if "--print=sysroot" in cmd:
            out.append(self.sysroot)
        if "--print=cfg" in cmd:
            out.extend(self.cfg)

        stdout = "".join(f"{line}\n" for line in out)
        stderr = "".join(f"{line}\n" for line in err)
        return subprocess.CompletedProcess(cmd, 0, stdout.encode(), stderr.encode())

    def probe_calls(self) -> list[list[str]]:
        """Invocations that asked for file names."""
        return [c for c in self.calls if "--print=file-names" in c]


@pytest.fixture
def fake_rustc(monkeypatch: pytest.MonkeyPatch) -> FakeRustc:
    fake = FakeRustc()
    monkeypatch.setattr("targetinfo.util.process.subprocess.run", fake)
    return fake
