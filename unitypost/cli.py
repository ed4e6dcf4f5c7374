"""CLI entrypoints for unitypost commands."""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from .config import ConfigError, PostProcessConfig, load_config
from .detection import DETECTORS, create_detector
from .errors import DetectionError
from .logging import configure_logging, get_logger
from .pipeline import PackagePostProcessor


def _add_common_options(parser: argparse.ArgumentParser, *, suppress_default: bool = False) -> None:
    default: object = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_project_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project-root",
        default=".",
        help="Path to the Unity project root (defaults to current directory).",
    )
    parser.add_argument(
        "--installation-base-path",
        help="Folder containing one subfolder per installed Unity editor version.",
    )
    parser.add_argument(
        "--detector",
        choices=DETECTORS,
        help="How to find the assemblies Unity already ships (default: shims).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a .unitypost.yml file (defaults to the one in the project root).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unitypost",
        description="Post-process installed NuGet packages so the Unity editor can import them.",
    )
    _add_common_options(parser)
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Post-process every package in the package root.",
    )
    _add_common_options(run_parser, suppress_default=True)
    _add_project_options(run_parser)
    run_parser.add_argument(
        "--package-root",
        help="Folder NuGet restored the packages into.",
    )
    run_parser.add_argument(
        "--no-tag-analyzers",
        dest="tag_analyzers",
        action="store_false",
        default=None,
        help="Leave Roslyn analyzers untagged so Unity does not run them.",
    )
    run_parser.add_argument(
        "--templates-dir",
        help="Folder with meta file templates overriding the bundled ones.",
    )
    run_parser.add_argument(
        "--generate-assembly-definitions",
        dest="generate_assembly_definitions",
        action="store_true",
        default=None,
        help="Scope analyzers of each package version with a generated assembly definition.",
    )
    run_parser.add_argument(
        "--unstable-guids",
        dest="stable_guids",
        action="store_false",
        default=None,
        help="Give ignored and analyzer meta files a fresh guid on every run.",
    )

    detect_parser = subparsers.add_parser(
        "detect",
        help="Print the assemblies the project's Unity version already ships.",
    )
    _add_common_options(detect_parser, suppress_default=True)
    _add_project_options(detect_parser)

    return parser


def _resolve_config(args: argparse.Namespace) -> PostProcessConfig:
    project_root = Path(args.project_root).expanduser().resolve()
    config = load_config(project_root, args.config)

    overrides: dict[str, object] = {}
    if getattr(args, "package_root", None):
        overrides["package_root"] = _resolve_path(args.package_root)
    if args.installation_base_path:
        overrides["installation_base_path"] = _resolve_path(args.installation_base_path)
    if args.detector:
        overrides["detector"] = args.detector
    if getattr(args, "templates_dir", None):
        overrides["templates_dir"] = _resolve_path(args.templates_dir)
    for flag in ("tag_analyzers", "generate_assembly_definitions", "stable_guids"):
        value = getattr(args, flag, None)
        if value is not None:
            overrides[flag] = value
    return replace(config, **overrides)


def _resolve_path(value: str) -> Path:
    return Path(value).expanduser().resolve()


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for unitypost commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    try:
        config = _resolve_config(args)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "run":
        missing = config.missing_inputs()
        if missing:
            parser.exit(1, f"Missing required inputs: {', '.join(missing)}\n")
        if not PackagePostProcessor(config).execute():
            parser.exit(1, "unitypost run failed. Run with --verbose for more details.\n")
    elif args.command == "detect":
        if config.installation_base_path is None:
            parser.exit(1, "Missing required inputs: installation base path\n")
        detector = create_detector(config.detector, shim_path_template=config.shim_path_template)
        try:
            names = asyncio.run(detector.detect(config.installation_base_path, config.project_root))
        except DetectionError as exc:
            logger.debug("Detection failed", exc_info=True)
            parser.exit(1, f"{exc}\n")
        for name in sorted(names, key=str.lower):
            print(name)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
