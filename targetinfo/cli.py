# SPDX-License-Identifier: MIT
"""Command-line interface for targetinfo."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from targetinfo.configure.config import BuildConfig, Config
from targetinfo.core.cfg import matches, parse_cfg_expr
from targetinfo.core.errors import TargetInfoError
from targetinfo.core.kinds import CompileKind, TargetFileType, TargetKind
from targetinfo.core.query import KNOWN_CRATE_TYPES
from targetinfo.core.target_info import TargetInfo
from targetinfo.tools.rustc import Rustc

# Set up logging
logger = logging.getLogger("targetinfo")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def load_target_info(args: argparse.Namespace) -> tuple[TargetInfo, str]:
    """Probe the compiler for the kind selected on the command line.

    Returns:
        The TargetInfo and the triple it describes.
    """
    config = Config.load(Path.cwd())
    rustc = Rustc.find(config)
    requested = args.target or config.requested_target()
    build_config = BuildConfig(rustc.host, requested)

    if args.host or requested is None:
        kind = CompileKind.HOST
        triple = rustc.host
    else:
        kind = CompileKind.TARGET
        triple = build_config.target_triple()

    logger.info("Learning about %s (%s) from %s", triple, kind.value, rustc.path)
    return TargetInfo.new(rustc, build_config, config, kind), triple


def cmd_info(args: argparse.Namespace) -> int:
    """Show sysroot, crate-type naming and cfg for the target."""
    info, triple = load_target_info(args)
    for crate_type in KNOWN_CRATE_TYPES:
        info.crate_type_info(crate_type)

    if args.json:
        print(json.dumps({"target": triple, **info.to_dict()}, indent=2))
        return 0

    print(f"target: {triple}")
    sysroot = info.sysroot_libdir
    print(f"sysroot libdir: {sysroot if sysroot is not None else 'unknown'}")
    print("crate types:")
    for crate_type in KNOWN_CRATE_TYPES:
        naming = info.crate_type_info(crate_type)
        if naming is None:
            print(f"  {crate_type}: unsupported")
        else:
            print(f"  {crate_type}: {naming[0]}<name>{naming[1]}")
    cfg = info.cfg()
    if cfg is None:
        print("cfg: unknown")
    else:
        print("cfg:")
        for c in cfg:
            print(f"  {c}")
    return 0


def cmd_cfg(args: argparse.Namespace) -> int:
    """Print the active cfg, or test it against an expression."""
    info, _ = load_target_info(args)
    cfg = info.cfg()
    if cfg is None:
        logger.error("The compiler did not report cfg information for this target")
        return 1

    if args.matches:
        return 0 if matches(parse_cfg_expr(args.matches), cfg) else 1

    if args.json:
        print(json.dumps([str(c) for c in cfg], indent=2))
    else:
        for c in cfg:
            print(c)
    return 0


def cmd_files(args: argparse.Namespace) -> int:
    """Show the files a crate type produces for the target."""
    info, triple = load_target_info(args)
    file_type = TargetFileType.LINKABLE if args.linkable else TargetFileType.NORMAL
    file_types = info.file_types(
        args.crate_type, file_type, TargetKind(args.kind), triple
    )
    if file_types is None:
        logger.error("crate-type %s is not supported for %s", args.crate_type, triple)
        return 1

    if args.json:
        data = [
            {
                "prefix": ft.prefix,
                "suffix": ft.suffix,
                "file_type": ft.target_file_type.value,
                "should_replace_hyphens": ft.should_replace_hyphens,
                **({"filename": ft.filename(args.name)} if args.name else {}),
            }
            for ft in file_types
        ]
        print(json.dumps(data, indent=2))
        return 0

    for ft in file_types:
        if args.name:
            print(ft.filename(args.name))
        else:
            print(f"{ft.prefix}<name>{ft.suffix} ({ft.target_file_type.value})")
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument("--target", metavar="TRIPLE", help="Target triple to probe")
    parser.add_argument(
        "--host",
        action="store_true",
        help="Probe the host even if a target is configured",
    )
    parser.add_argument("--json", action="store_true", help="Output JSON")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the targetinfo CLI."""
    parser = argparse.ArgumentParser(
        prog="targetinfo",
        description="Learn target-specific information from the Rust compiler.",
        epilog="Run 'targetinfo <command> --help' for command-specific help.",
    )
    from targetinfo import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # targetinfo info
    info_parser = subparsers.add_parser(
        "info", help="Show sysroot, crate-type naming and cfg"
    )
    add_common_args(info_parser)
    info_parser.set_defaults(func=cmd_info)

    # targetinfo cfg
    cfg_parser = subparsers.add_parser("cfg", help="Show the active cfg")
    add_common_args(cfg_parser)
    cfg_parser.add_argument(
        "--matches",
        metavar="EXPR",
        help="Exit 0 if the cfg expression matches, 1 otherwise",
    )
    cfg_parser.set_defaults(func=cmd_cfg)

    # targetinfo files
    files_parser = subparsers.add_parser(
        "files", help="Show the files produced for a crate type"
    )
    add_common_args(files_parser)
    files_parser.add_argument("crate_type", help="Crate type (e.g. bin, dylib)")
    files_parser.add_argument(
        "--kind",
        choices=[k.value for k in TargetKind],
        default=TargetKind.LIB.value,
        help="Role of the unit (default: lib)",
    )
    files_parser.add_argument(
        "--linkable", action="store_true", help="Mark the base file as linkable"
    )
    files_parser.add_argument("--name", help="Crate name to build file names for")
    files_parser.set_defaults(func=cmd_files)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(args.verbose, args.debug)

    try:
        result: int = args.func(args)
    except TargetInfoError as e:
        logger.error("%s", e)
        if e.__cause__ is not None:
            logger.error("Caused by: %s", e.__cause__)
        return 1
    return result


if __name__ == "__main__":
    sys.exit(main())
