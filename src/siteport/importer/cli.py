"""CLI commands for listing and verifying export packages."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import SitePortConfig
from .controller import ImportController
from .errors import ManifestError
from .registry import load_handler_modules
from siteport.common import ConfigLoader, ConfigurationError, setup_logging

APP_NAME = "siteport"


def _get_logger() -> logging.Logger:
    # Use __package__ to avoid __main__ when run as module
    return logging.getLogger(__package__ or __name__)


def _export_folder(config: SitePortConfig, override: Optional[Path]) -> Path:
    return override if override else Path(config.packages.export_folder)


def list_command(config: SitePortConfig, export_folder_override: Optional[Path] = None, as_json: bool = False) -> int:
    """List the packages in the export folder.

    Returns:
        Exit code (0 for success)
    """
    logger = _get_logger()
    controller = ImportController(_export_folder(config, export_folder_override))

    try:
        packages = controller.get_import_packages()
    except ManifestError as e:
        logger.error(f"Failed to list packages: {e}")
        return 1

    if as_json:
        print(json.dumps([p.to_dict() for p in packages], indent=2))
    else:
        for package in packages:
            print(f"{package.package_id}\t{package.name}\t{package.description}")
    return 0


def verify_command(
    config: SitePortConfig,
    package_id: str,
    export_folder_override: Optional[Path] = None,
    as_json: bool = False,
) -> int:
    """Verify one package and print its import summary.

    Returns:
        Exit code (0 if the package is valid, 1 otherwise)
    """
    logger = _get_logger()
    controller = ImportController(_export_folder(config, export_folder_override))
    result = controller.verify_import_package(package_id)

    if as_json:
        print(json.dumps({
            "package_id": package_id,
            "is_valid": result.is_valid,
            "error_message": result.error_message,
            "summary": result.summary.to_dict() if result.summary else None,
        }, indent=2))
    elif not result.is_valid:
        logger.error(result.error_message or f"Not an import package: {package_id}")
    else:
        summary = result.summary
        print(f"Package {package_id} is valid")
        for item in summary.summary_items:
            marker = "*" if item.show_item else " "
            print(f"  {marker} {item.category:<20} {item.total_items}")
        print(f"  include deletions: {summary.include_deletions}")
        print(f"  include profile properties: {summary.include_profile_properties}")

    return 0 if result.is_valid else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="List and verify site export packages before import"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )
    parser.add_argument(
        "--export-folder",
        type=Path,
        required=False,
        help="Folder containing export packages (overrides config)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="List export packages")
    verify_parser = subparsers.add_parser("verify", help="Verify a package and summarize its contents")
    verify_parser.add_argument("package_id", help="Package folder name")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    loader = ConfigLoader(app_name=APP_NAME, config_class=SitePortConfig)
    try:
        config = loader.load(defaults_path=args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        level=config.logging.level,
        format=config.logging.format,
        log_file=config.logging.file,
    )
    load_handler_modules(config.handlers.modules)

    if args.command == "list":
        return list_command(config, args.export_folder, as_json=args.json)
    return verify_command(config, args.package_id, args.export_folder, as_json=args.json)


if __name__ == "__main__":
    sys.exit(main())
