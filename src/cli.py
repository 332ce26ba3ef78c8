"""Command-line interface for batch label processing.

Provides subcommands for processing a folder of shipping label PDFs
(OCR, identifier extraction, order fulfillment), extracting a single
label, and re-running extraction over previously OCR'd text.
"""

import argparse
import csv
import json
import sys
from contextlib import nullcontext
from pathlib import Path

from src.extraction.label_extractor import LabelExtractor
from src.extraction.report import ExtractionReport
from src.fulfillment.shipstation import FulfillmentClient
from src.ocr.document_processor import DocumentProcessor
from src.utils.config import AppConfig, load_config
from src.utils.errors import FulfillmentError
from src.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_COLUMNS = [
    "filename",
    "status",
    "message",
    "order_number",
    "tracking_number",
    "ocr_confidence",
    "order_id",
    "error",
]
_SUCCESS_STATUSES = ("success", "extracted")


def _find_documents(input_dir: Path) -> list[Path]:
    """Find all label PDFs in a directory.

    Args:
        input_dir: Directory to scan.

    Returns:
        Sorted list of PDF paths, matched case-insensitively.
    """
    return sorted(
        p for p in input_dir.iterdir() if p.is_file() and p.suffix.lower() == ".pdf"
    )


def _log_diagnostics(report: ExtractionReport) -> None:
    for diagnostics in report.diagnostics:
        for line in diagnostics.format_lines():
            logger.error(line)


def process_folder(
    input_dir: Path,
    output_csv: Path | None = None,
    dry_run: bool = False,
    verbose: bool = False,
    config: AppConfig | None = None,
) -> dict[str, int]:
    """Process all label PDFs in a folder.

    Args:
        input_dir: Directory containing label PDFs.
        output_csv: Optional path for a CSV export of the results.
        dry_run: Extract identifiers without updating any order.
        verbose: Whether to print per-file progress.
        config: Application configuration. Loaded from disk if ``None``.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    files = _find_documents(input_dir)
    if not files:
        logger.warning("No PDF files found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d PDF files to process in %s", len(files), input_dir)

    config = config or load_config()
    processor = DocumentProcessor(config)
    extractor = LabelExtractor(config.extraction)
    client = nullcontext() if dry_run else FulfillmentClient(config.fulfillment)

    results: list[dict[str, object]] = []
    with client as fulfillment:
        for i, file_path in enumerate(files, 1):
            if verbose:
                print(f"Processing [{i}/{len(files)}]: {file_path.name}")
            try:
                result = _process_single_file(file_path, processor, extractor, fulfillment)
            except Exception as exc:
                logger.error("Error processing file %s: %s", file_path.name, exc)
                result = {
                    "filename": file_path.name,
                    "status": "failed",
                    "message": str(exc),
                    "error": type(exc).__name__,
                }
            results.append(result)

    successful = sum(1 for r in results if r["status"] in _SUCCESS_STATUSES)
    summary = {
        "total": len(files),
        "successful": successful,
        "failed": len(files) - successful,
    }

    if output_csv is not None:
        _write_csv(results, output_csv)
        logger.info("Results written to %s", output_csv)

    _print_summary(summary, results, output_csv)
    return summary


def _process_single_file(
    file_path: Path,
    processor: DocumentProcessor,
    extractor: LabelExtractor,
    fulfillment: FulfillmentClient | None,
) -> dict[str, object]:
    """Run one label through OCR, extraction, and fulfillment.

    Args:
        file_path: Path to the label PDF.
        processor: Document processor instance.
        extractor: Label extractor instance.
        fulfillment: Fulfillment client, or ``None`` for a dry run.

    Returns:
        Result row for the label.
    """
    doc_result = processor.process(file_path, file_path.name)
    report = extractor.extract(doc_result.combined_text, file_path.name)

    row: dict[str, object] = {
        "filename": file_path.name,
        "order_number": report.order_number,
        "tracking_number": report.tracking_number,
        "ocr_confidence": round(doc_result.confidence, 2),
        "order_id": None,
        "error": None,
    }

    if not report.success:
        _log_diagnostics(report)
        logger.error("%s: %s", file_path.name, report.message)
        row.update(status="failed", message=report.message, error="NotFound")
        return row

    if fulfillment is None:
        row.update(status="extracted", message="Dry run: fulfillment skipped")
        return row

    try:
        outcome = fulfillment.fulfill(report.order_number, report.tracking_number)
    except FulfillmentError as exc:
        logger.error("Failed to process order %s: %s", report.order_number, exc)
        row.update(status="failed", message=exc.message, error=type(exc).__name__)
        return row

    logger.info(
        "Successfully processed order %s with tracking %s",
        report.order_number,
        report.tracking_number,
    )
    row.update(
        status="success",
        message="Order processed successfully",
        order_id=outcome.order_id,
    )
    return row


def _write_csv(results: list[dict[str, object]], output_path: Path) -> None:
    """Write result rows to a CSV file.

    Args:
        results: List of result dictionaries.
        output_path: Path for the output CSV file.
    """
    if not results:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(results)


def _print_summary(
    summary: dict[str, int],
    results: list[dict[str, object]],
    output_csv: Path | None = None,
) -> None:
    """Print batch processing summary to stdout.

    Args:
        summary: Counts of total, successful, and failed documents.
        results: Per-file result rows.
        output_csv: Path to the output CSV, if one was written.
    """
    print(f"\n{'=' * 50}")
    print("Processing Summary")
    print(f"{'=' * 50}")
    print(f"Total Files Processed: {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    if results:
        print("\nDetailed Results:")
    for r in results:
        mark = "✓" if r["status"] in _SUCCESS_STATUSES else "✗"
        line = f"{mark} {r['filename']}: {r['message']}"
        if r.get("order_number"):
            line += f" (Order: {r['order_number']})"
        if r.get("tracking_number"):
            line += f" (Tracking: {r['tracking_number']})"
        print(line)
    if output_csv is not None:
        print(f"Output:     {output_csv}")


def extract_single(file_path: Path, config: AppConfig | None = None) -> dict[str, object]:
    """OCR a single label and return its extraction report.

    Args:
        file_path: Path to the label PDF.
        config: Application configuration. Loaded from disk if ``None``.

    Returns:
        Report dictionary plus the OCR confidence and raw text.
    """
    config = config or load_config()
    processor = DocumentProcessor(config)
    extractor = LabelExtractor(config.extraction)

    doc_result = processor.process(file_path, file_path.name)
    report = extractor.extract(doc_result.combined_text, file_path.name)

    result = report.to_dict()
    result["ocr_confidence"] = doc_result.confidence
    result["raw_text"] = doc_result.combined_text
    return result


def parse_text(
    text_file: Path,
    file_name: str | None = None,
    config: AppConfig | None = None,
) -> dict[str, object]:
    """Run extraction over previously OCR'd text.

    Args:
        text_file: File holding the OCR text of one label.
        file_name: Label file name for the tracking fallback. Defaults
            to the text file's name with a ``.pdf`` suffix.
        config: Application configuration. Loaded from disk if ``None``.

    Returns:
        Report dictionary.
    """
    config = config or load_config()
    extractor = LabelExtractor(config.extraction)
    text = text_file.read_text(encoding="utf-8")
    report = extractor.extract(text, file_name or text_file.with_suffix(".pdf").name)
    return report.to_dict()


def _emit_json(result: dict[str, object], output: Path | None) -> None:
    output_str = json.dumps(result, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(output_str)
        print(f"Output written to {output}")
    else:
        print(output_str)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Shipping Label Processor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: configs/config.yaml)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    batch_parser = subparsers.add_parser("batch", help="Process a folder of label PDFs")
    batch_parser.add_argument(
        "input_dir",
        type=Path,
        nargs="?",
        default=Path("."),
        help="Directory with label PDFs (default: current directory)",
    )
    batch_parser.add_argument("-o", "--output", type=Path, help="Output CSV file")
    batch_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Extract identifiers without updating orders",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    single_parser = subparsers.add_parser("extract", help="Extract identifiers from one PDF")
    single_parser.add_argument("file", type=Path, help="Label PDF to process")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    parse_parser = subparsers.add_parser(
        "parse", help="Extract identifiers from previously OCR'd text"
    )
    parse_parser.add_argument("text_file", type=Path, help="Text file with OCR output")
    parse_parser.add_argument(
        "--file-name", help="Label file name used for the tracking number fallback"
    )
    parse_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    config = load_config(args.config)
    setup_logging(config.log_level, config.log_dir)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        logger.info("Starting PDF processing in directory: %s", args.input_dir)
        process_folder(
            args.input_dir,
            args.output,
            args.dry_run,
            args.verbose,
            config,
        )
    elif args.command == "extract":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        _emit_json(extract_single(args.file, config), args.output)
    elif args.command == "parse":
        if not args.text_file.exists():
            print(f"Error: {args.text_file} does not exist", file=sys.stderr)
            sys.exit(1)
        _emit_json(parse_text(args.text_file, args.file_name, config), args.output)


if __name__ == "__main__":
    main()
