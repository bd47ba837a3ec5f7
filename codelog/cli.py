"""Command line interface for the Excel to Liquibase converter."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, Optional

from tabulate import tabulate

from .config import AppConfig, load_config
from .conversion import ConversionResult, convert
from .errors import CodelogError
from .io import sheet_names
from .reporting import export_changelog, summarise_result
from .template import build_template_workbook

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/config.yaml")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert code-table workbooks into a Liquibase changelog")
    parser.add_argument("--input", type=Path, help="Workbook (.xlsx or .xls) to convert")
    parser.add_argument(
        "--sheet",
        action="append",
        help="Sheet to convert; repeat to select several (default: all sheets)",
    )
    parser.add_argument("--author", help="Author recorded on every changeset")
    parser.add_argument("--config", type=Path, help="Path to YAML configuration")
    parser.add_argument("--output-dir", type=Path, help="Directory for the generated changelog")
    parser.add_argument("--stdout", action="store_true", help="Print the changelog instead of writing files")
    parser.add_argument("--list-sheets", action="store_true", help="List the sheets of --input and exit")
    parser.add_argument("--write-template", type=Path, help="Write a template workbook to this path and exit")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING)")
    parser.add_argument("--quiet", action="store_true", help="Suppress console summary output")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    if args.write_template:
        return _write_template(args.write_template)

    if args.input is None:
        parser.error("--input is required unless --write-template is given")

    try:
        config = _load_app_config(args.config)
        _apply_overrides(config, args)
    except Exception as exc:  # pragma: no cover - CLI validation
        logger.error("Failed to load configuration: %s", exc)
        return 1

    try:
        raw = _resolve_override_path(args.input).read_bytes()
    except OSError as exc:
        logger.error("Failed to read workbook: %s", exc)
        return 1

    if args.list_sheets:
        try:
            names = sheet_names(raw)
        except CodelogError as exc:
            logger.error("%s", exc)
            return 1
        for name in names:
            print(name)
        return 0

    author = config.changelog.author
    try:
        result = convert(raw, author, config.sheets, settings=config.changelog)
    except CodelogError as exc:
        logger.error("Conversion failed: %s", exc)
        return 1

    if args.stdout:
        print(result.xml)
    else:
        try:
            export_changelog(result, config.output, author=author, requested_sheets=config.sheets)
        except OSError as exc:
            logger.exception("Failed to write changelog: %s", exc)
            return 1

    if not args.quiet and not args.stdout:
        _print_summary(result)

    return 0


def _load_app_config(path: Optional[Path]) -> AppConfig:
    if path is not None:
        return load_config(path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return AppConfig()


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> None:
    if args.author is not None:
        config.changelog.author = args.author

    if args.sheet:
        config.sheets = [name.strip() for name in args.sheet if name.strip()]

    if args.output_dir:
        config.output.directory = _resolve_override_path(args.output_dir)


def _write_template(path: Path) -> int:
    target = _resolve_override_path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(build_template_workbook())
    except OSError as exc:
        logger.error("Failed to write template: %s", exc)
        return 1
    logger.info("Template written to %s", target)
    return 0


def _resolve_override_path(path: Path) -> Path:
    path = Path(path).expanduser()
    if path.is_absolute():
        return path
    return (Path.cwd() / path).resolve()


def _print_summary(result: ConversionResult) -> None:
    summary = summarise_result(result)
    print("Sheet summary:")
    print(tabulate(summary, headers="keys", tablefmt="github", showindex=False))
    print(f"Processed {len(result.processed_sheets)} sheet(s), skipped {len(result.skipped_sheets)}")


if __name__ == "__main__":  # pragma: no cover - manual execution entry point
    raise SystemExit(main())
