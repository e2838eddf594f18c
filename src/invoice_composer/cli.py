"""Command-line interface for rendering invoice receipts."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .config import ComposerConfig, load_config
from .errors import ImageDecodeFailure, InvoiceComposerError
from .imaging import load_raster_image
from .layout_dump import write_layout_json
from .models import InvoiceRecord
from .pipeline import RenderResult, render_batch
from .records import invoice_from_dict, logo_reference, read_invoice_file, write_invoice_file
from .sample import generate_sample_invoices

logger = logging.getLogger(__name__)


def load_invoice_with_logo(
    path: Path,
    logo_override: Optional[str] = None,
) -> Tuple[InvoiceRecord, Optional[ImageDecodeFailure]]:
    """
    Read an invoice file and decode its logo.

    Logo paths named in the invoice are resolved relative to the invoice
    file. A logo that cannot be decoded is returned as a failure instead
    of raised.
    """
    data = read_invoice_file(path)
    source = logo_override
    if source is None:
        source = logo_reference(data)
        if source and not source.startswith("data:") and not Path(source).is_absolute():
            source = str(path.parent / source)

    logo = None
    failure = None
    if source:
        try:
            logo = load_raster_image(source)
        except ImageDecodeFailure as e:
            failure = e

    return invoice_from_dict(data, logo=logo), failure


def render_files(
    paths: List[Path],
    config: ComposerConfig,
    out_dir: Path,
    logo: Optional[str] = None,
    dump_layout: bool = False,
    workers: Optional[int] = None,
) -> List[RenderResult]:
    """Render invoice files to PDFs in ``out_dir`` and return the results."""
    records = []
    failures = []
    for path in paths:
        record, failure = load_invoice_with_logo(path, logo)
        records.append(record)
        failures.append(failure)

    results = render_batch(records, config, max_workers=workers, logo_failures=failures)

    for path, result in zip(paths, results):
        pdf_path = result.file.write_to(out_dir)
        print(f"  {path.name} -> {pdf_path} ({result.page_count} page(s), total {result.totals.total})")
        for warning in result.warnings:
            print(f"    WARNING: {warning}")
        if dump_layout:
            write_layout_json(result.document, pdf_path.with_suffix(".layout.json"))

    return results


def write_samples(count: int, seed: int, out_dir: Path, num_items: Optional[int] = None) -> List[Path]:
    """Write sample invoice YAML files and return their paths."""
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for record in generate_sample_invoices(count, seed=seed, num_items=num_items):
        path = out_dir / f"{record.document_number}.yaml"
        write_invoice_file(record, path)
        paths.append(path)
    return paths


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="invoice-composer",
        description="Render invoice receipts to paginated PDFs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render invoice files to PDF")
    render.add_argument("invoices", type=Path, nargs="+", help="Invoice YAML/JSON files")
    render.add_argument(
        "--out-dir",
        type=Path,
        default=Path("out"),
        help="Output directory for PDFs",
    )
    render.add_argument(
        "--logo",
        help="Logo file or data URI used for every invoice (overrides the invoice's own)",
    )
    render.add_argument(
        "--dump-layout",
        action="store_true",
        help="Also write the rendered layout as JSON next to each PDF",
    )
    render.add_argument(
        "--workers",
        type=int,
        help="Number of parallel renders (overrides config)",
    )

    sample = subparsers.add_parser("sample", help="Write sample invoice files")
    sample.add_argument("--count", type=int, default=5, help="Number of invoices")
    sample.add_argument("--seed", type=int, default=42, help="Random seed")
    sample.add_argument("--items", type=int, help="Line items per invoice (random when omitted)")
    sample.add_argument(
        "--out-dir",
        type=Path,
        default=Path("samples"),
        help="Output directory for invoice files",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)

        if args.command == "sample":
            paths = write_samples(args.count, args.seed, args.out_dir, args.items)
            print(f"Wrote {len(paths)} sample invoice(s) to {args.out_dir}")
            return 0

        print(f"Rendering {len(args.invoices)} invoice(s)...")
        print(f"Output directory: {args.out_dir}")
        results = render_files(
            args.invoices,
            config,
            args.out_dir,
            logo=args.logo,
            dump_layout=args.dump_layout,
            workers=args.workers,
        )
    except (InvoiceComposerError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    total_pages = sum(r.page_count for r in results)
    total_warnings = sum(len(r.warnings) for r in results)
    print("\nRendering complete!")
    print(f"  PDFs: {len(results)}")
    print(f"  Pages: {total_pages}")
    print(f"  Warnings: {total_warnings}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
