"""Command-line interface for scanning inventory sheets.

Subcommands scan a single photo, scan a folder into one CSV, parse text
that was already recognised, or just compress an image.
"""

import argparse
import json
import sys
from pathlib import Path

from linen_ocr.export.csv_export import (
    record_to_json,
    records_to_rows,
    write_csv,
    write_rows_csv,
)
from linen_ocr.extraction.inventory_parser import InventoryParser
from linen_ocr.extraction.models import InventoryRecord
from linen_ocr.imaging.compressor import compress_image
from linen_ocr.scanner import SUPPORTED_EXTENSIONS, InventoryScanner
from linen_ocr.utils.config import load_config
from linen_ocr.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _find_images(input_dir: Path) -> list[Path]:
    """Find all supported image files in a directory.

    Args:
        input_dir: Directory to scan.

    Returns:
        Sorted list of image paths.
    """
    return sorted(
        p
        for p in input_dir.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
    )


def process_folder(
    input_dir: Path,
    output_csv: Path,
    config_path: Path | None = None,
    verbose: bool = False,
) -> dict[str, int]:
    """Scan every image in a folder and write all rows to one CSV.

    Args:
        input_dir: Directory containing sheet photos.
        output_csv: Path for the output CSV file.
        config_path: Optional configuration file.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, failed and items counts.
    """
    scanner = InventoryScanner(load_config(config_path))

    files = _find_images(input_dir)
    if not files:
        logger.warning("No images found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0, "items": 0}

    logger.info("Found %d images to process", len(files))

    records: list[tuple[str, InventoryRecord]] = []
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")
        try:
            result = scanner.scan(file_path)
            records.append((file_path.name, result.record))
        except Exception as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            failed += 1

    rows = records_to_rows(records)
    write_rows_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {
        "total": len(files),
        "successful": len(records),
        "failed": failed,
        "items": len(rows),
    }
    _print_summary(summary, output_csv)
    return summary


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Scan Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Items:      {summary['items']}")
    print(f"Output:     {output_csv}")


def extract_single(file_path: Path, config_path: Path | None = None) -> dict:
    """Scan one photo and return the result as a plain dict."""
    scanner = InventoryScanner(load_config(config_path))
    return scanner.scan(file_path).to_dict()


def _emit(text: str, output: Path | None) -> None:
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
        print(f"Output written to {output}")
    else:
        print(text)


def _require(path: Path, is_dir: bool = False) -> None:
    ok = path.is_dir() if is_dir else path.exists()
    if not ok:
        kind = "is not a directory" if is_dir else "does not exist"
        print(f"Error: {path} {kind}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(description="Linen inventory sheet scanner")
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    single_parser = subparsers.add_parser("extract", help="Scan a single sheet photo")
    single_parser.add_argument("file", type=Path, help="Image file to scan")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")
    single_parser.add_argument("--csv", type=Path, help="Also write a CSV report")

    batch_parser = subparsers.add_parser("batch", help="Scan a folder of sheet photos")
    batch_parser.add_argument("input_dir", type=Path, help="Directory with images")
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("inventory.csv"),
        help="Output CSV file (default: inventory.csv)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    parse_parser = subparsers.add_parser("parse", help="Parse recognised text")
    parse_parser.add_argument("file", type=Path, help="Text file with OCR output")
    parse_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    compress_parser = subparsers.add_parser("compress", help="Compress an image")
    compress_parser.add_argument("file", type=Path, help="Image to compress")
    compress_parser.add_argument("output", type=Path, help="Compressed output file")
    compress_parser.add_argument(
        "--max-kb", type=int, default=900, help="Size ceiling in KB (default: 900)"
    )

    args = parser.parse_args(argv)

    setup_logging(load_config(args.config).log_level)

    if args.command == "extract":
        _require(args.file)
        result = extract_single(args.file, args.config)
        if args.csv:
            write_csv(InventoryRecord.from_dict(result["data"]), args.csv)
        _emit(json.dumps(result, indent=2), args.output)
    elif args.command == "batch":
        _require(args.input_dir, is_dir=True)
        process_folder(args.input_dir, args.output, args.config, args.verbose)
    elif args.command == "parse":
        _require(args.file)
        record = InventoryParser().parse(args.file.read_text())
        _emit(record_to_json(record), args.output)
    elif args.command == "compress":
        _require(args.file)
        result = compress_image(args.file.read_bytes(), args.max_kb * 1024)
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(result.data)
        print(
            f"{args.file.name}: {result.original_size // 1024}KB -> "
            f"{result.compressed_size // 1024}KB"
        )
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
