"""
Coal log digitizer: CLI entry point.

Usage:
    python digitizer.py serve [--host HOST] [--port PORT] [--mock]
    python digitizer.py extract <image> [-o <out.csv>] [--xlsx <out.xlsx>] [--save]

``serve`` runs the web UI and the backend API in one Flask process.
``extract`` sends a log sheet photo through the backend API and writes
the extracted table as CSV (and optionally Excel).
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from typing import List, Optional

from client.extraction_client import ExtractionClient
from capture.upload import load_image_file
from config import Settings, load_settings
from errors import DigitizerError
from export.csv_export import export_filename, table_to_csv
from export.xlsx_export import table_to_xlsx

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


# -------------------------------------------------------------------
# Commands
# -------------------------------------------------------------------


def run_serve(settings: Settings, args: argparse.Namespace) -> int:
    from server.app import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    if args.mock:
        settings = dataclasses.replace(settings, mock_api=True)
    if not os.getenv("API_BASE_URL"):
        settings = dataclasses.replace(settings, api_base_url=f"http://{host}:{port}")

    app = create_app(settings)
    app.run(host=host, port=port, threaded=True)
    return 0


def run_extract(settings: Settings, args: argparse.Namespace) -> int:
    if not os.path.isfile(args.image):
        logger.error("File not found: %s", args.image)
        return 1

    image = load_image_file(args.image)
    if image is None:
        logger.error("Not an image file: %s", args.image)
        return 1

    client = ExtractionClient(settings.api_base_url, timeout=settings.request_timeout)
    try:
        table = client.extract_table(image)
    except DigitizerError:
        logger.exception("Extraction failed for %s", args.image)
        return 1

    output_path = args.output or export_filename("csv")
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(table_to_csv(table))
    logger.info("CSV written to %s", output_path)

    if args.xlsx:
        with open(args.xlsx, "wb") as f:
            f.write(table_to_xlsx(table))
        logger.info("Excel workbook written to %s", args.xlsx)

    if args.save:
        try:
            client.save_table(table)
        except DigitizerError:
            logger.exception("Saving the table failed")
            return 1
        logger.info("Table added to database")

    return 0


# -------------------------------------------------------------------
# CLI
# -------------------------------------------------------------------


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Digitize photographed coal log book tables.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the web UI and backend API")
    serve.add_argument("--host", default=None, help="Bind address (default: API_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: API_PORT)")
    serve.add_argument(
        "--mock",
        action="store_true",
        help="Answer API calls with canned data instead of calling a vision model",
    )

    extract = sub.add_parser("extract", help="Extract the table from an image file")
    extract.add_argument("image", help="Path to the log sheet image")
    extract.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output CSV path (default: coal-log-<date>.csv)",
    )
    extract.add_argument("--xlsx", default=None, help="Also write an Excel workbook")
    extract.add_argument(
        "--save",
        action="store_true",
        help="Also POST the table to /api/save-to-database",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    _configure_logging(args.verbose)
    settings = load_settings()

    if args.command == "serve":
        return run_serve(settings, args)
    return run_extract(settings, args)


if __name__ == "__main__":
    sys.exit(main())
