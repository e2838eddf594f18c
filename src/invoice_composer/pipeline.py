"""End-to-end rendering: validate, compose, emit."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from .composer import DocumentComposer
from .config import ComposerConfig
from .document import RenderedDocument
from .emitter import DownloadableFile, FileEmitter
from .errors import ImageDecodeFailure
from .models import InvoiceRecord, validate_line_items
from .tax import InvoiceTotals, compute_totals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    """Outcome of one render: the document, its PDF and any warnings."""
    document: RenderedDocument
    file: DownloadableFile
    totals: InvoiceTotals
    warnings: List[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return self.document.page_count


def render_invoice(
    record: InvoiceRecord,
    config: Optional[ComposerConfig] = None,
    logo_failure: Optional[ImageDecodeFailure] = None,
) -> RenderResult:
    """
    Render one invoice record to a document and a downloadable PDF.

    Args:
        record: Invoice snapshot; its logo, if any, is already decoded
        config: Composer configuration (defaults when omitted)
        logo_failure: Failure reported while acquiring the logo. The
            invoice is rendered without a logo and the failure is
            returned as a warning.

    Raises:
        InvalidLineItems: No items, or an item with a negative amount
        UnknownJurisdiction: Tax code not in the tax table
    """
    config = config or ComposerConfig()
    warnings: List[str] = []

    validate_line_items(record.line_items)

    if logo_failure is not None:
        logger.warning("Rendering %r without logo: %s", record.document_number, logo_failure)
        warnings.append(str(logo_failure))
        if record.issuer.logo is not None:
            record = replace(record, issuer=replace(record.issuer, logo=None))

    totals = compute_totals(record)
    document = DocumentComposer(config).compose(record, totals)
    file = FileEmitter(config).emit(
        document,
        document_number=record.document_number,
        title=f"{config.document_title.title()} {record.document_number}".strip(),
    )

    logger.info(
        "Rendered %s: %d page(s), total %s", file.filename, document.page_count, totals.total,
    )
    return RenderResult(document=document, file=file, totals=totals, warnings=warnings)


def render_batch(
    records: Sequence[InvoiceRecord],
    config: Optional[ComposerConfig] = None,
    max_workers: Optional[int] = None,
    logo_failures: Optional[Sequence[Optional[ImageDecodeFailure]]] = None,
) -> List[RenderResult]:
    """Render several invoices in parallel; results keep the input order.

    Renders share no mutable state. ``logo_failures``, when given, lines
    up with ``records``. The first failing render re-raises its error
    once all submitted renders have finished.
    """
    config = config or ComposerConfig()
    workers = max_workers or config.max_workers
    if logo_failures is None:
        logo_failures = [None] * len(records)
    if len(logo_failures) != len(records):
        raise ValueError("logo_failures must have one entry per record")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(render_invoice, record, config, failure)
            for record, failure in zip(records, logo_failures)
        ]
        return [f.result() for f in futures]
