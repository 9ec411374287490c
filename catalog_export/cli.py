"""Command line interface for catalog exports.

Usage:

    catalog-export xlsx products
    catalog-export xml categories --out data/export/categories.xml
    catalog-export txt states

Settings come from ``config/config.json`` and catalog records from
``data/catalog.json`` unless overridden.
"""

import argparse
import logging
import os
import sys
from typing import Callable, Dict, List, Optional

from . import markup, xlsx
from .errors import ExportError
from .facade import ExportFacade
from .fileio import atomic_write_bytes, atomic_write_text
from .settings import CONFIG_PATH, load_settings
from .store import load_store

DATA_PATH = "data/catalog.json"
EXPORT_DIR = "data/export"

XLSX_ENTITIES = ("manufacturers", "categories", "products", "orders", "customers")
XML_ENTITIES = XLSX_ENTITIES
TXT_ENTITIES = ("newsletter-subscribers", "states")

EXTENSIONS = {"xlsx": "xlsx", "xml": "xml", "txt": "txt"}


def _exporters(facade: ExportFacade) -> Dict[str, Dict[str, Callable[[], object]]]:
    return {
        "xlsx": {
            "manufacturers": facade.export_manufacturers_xlsx,
            "categories": facade.export_categories_xlsx,
            "products": facade.export_products_xlsx,
            "orders": facade.export_orders_xlsx,
            "customers": facade.export_customers_xlsx,
        },
        "xml": {
            "manufacturers": facade.export_manufacturers_xml,
            "categories": facade.export_categories_xml,
            "products": facade.export_products_xml,
            "orders": facade.export_orders_xml,
            "customers": facade.export_customers_xml,
        },
        "txt": {
            "newsletter-subscribers": facade.export_newsletter_subscribers_txt,
            "states": facade.export_states_txt,
        },
    }


def default_output_path(fmt: str, entity: str) -> str:
    return os.path.join(EXPORT_DIR, f"{entity.replace('-', '_')}.{EXTENSIONS[fmt]}")


def run_export(fmt: str, entity: str, *, config_path: str, data_path: str, out_path: Optional[str]) -> int:
    """Run one export and write its file; returns a process exit code."""
    settings = load_settings(config_path)
    store = load_store(data_path, picture_base_path=settings.picture_base_path)
    facade = ExportFacade(store, settings)
    result = _exporters(facade)[fmt][entity]()

    path = out_path or default_output_path(fmt, entity)
    if fmt == "xlsx":
        xlsx.save(result, path)
    elif fmt == "xml":
        atomic_write_bytes(path, markup.to_bytes(result))
    else:
        atomic_write_text(path, result)

    print(f"export {fmt} {entity}: wrote {path}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the top-level CLI argument parser."""
    parser = argparse.ArgumentParser(prog="catalog-export")
    parser.add_argument("--config", default=CONFIG_PATH)
    parser.add_argument("--data", default=DATA_PATH)
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="format")

    for fmt, entities in (("xlsx", XLSX_ENTITIES), ("xml", XML_ENTITIES), ("txt", TXT_ENTITIES)):
        cmd = sub.add_parser(fmt)
        cmd.add_argument("entity", choices=entities)
        cmd.add_argument("--out", default=None)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.format in EXTENSIONS:
        try:
            return run_export(
                args.format,
                args.entity,
                config_path=args.config,
                data_path=args.data,
                out_path=args.out,
            )
        except ExportError as exc:
            print(f"export {args.format} {args.entity}: failed: {exc}", file=sys.stderr)
            return 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
