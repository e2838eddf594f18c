"""Reading invoice records from files and converting them to the stored form."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
import yaml

from .errors import InvalidInvoiceData
from .imaging import RasterImage
from .models import (
    NO_TAX, Client, InvoiceRecord, Issuer, Jurisdiction, LineItem, TaxSelection,
)
from .tax import InvoiceTotals, compute_totals

# Stored tax option values
TAX_OPTION_NONE = "none"
TAX_OPTION_CA = "ca"


def read_invoice_file(path: Path) -> Dict[str, Any]:
    """Read a YAML (or JSON) invoice file into a mapping."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidInvoiceData(f"{path}: invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise InvalidInvoiceData(f"{path}: expected a mapping at the top level")
    return data


def parse_amount(value: Any, field_name: str = "amount") -> Decimal:
    """Parse a money amount without going through binary floats."""
    if isinstance(value, bool) or value is None:
        raise InvalidInvoiceData(f"{field_name}: expected a number, got {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidInvoiceData(f"{field_name}: not a number: {value!r}") from None
    if not amount.is_finite():
        raise InvalidInvoiceData(f"{field_name}: not a finite number: {value!r}")
    return amount


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise InvalidInvoiceData(f"issue_date: not an ISO date: {value!r}") from None


def parse_tax_selection(value: Any) -> TaxSelection:
    """Accept ``None``/``"none"``, a bare code, or ``{"option": ..., "location": ...}``."""
    if value is None:
        return NO_TAX
    if isinstance(value, str):
        code = value.strip().upper()
        if not code or code == TAX_OPTION_NONE.upper():
            return NO_TAX
        return Jurisdiction(code)
    if isinstance(value, Mapping):
        option = str(value.get("option", TAX_OPTION_NONE)).lower()
        if option == TAX_OPTION_NONE:
            return NO_TAX
        location = value.get("location") or value.get("code")
        if not location:
            raise InvalidInvoiceData(f"tax: option {option!r} needs a location")
        return Jurisdiction(str(location).strip().upper())
    raise InvalidInvoiceData(f"tax: unsupported value {value!r}")


def _require(data: Mapping, key: str, context: str) -> Any:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInvoiceData(f"{context}.{key} is required")
    return value


def _parse_line_items(items: Any) -> List[LineItem]:
    if not isinstance(items, list):
        raise InvalidInvoiceData("line_items: expected a list")
    line_items = []
    for i, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise InvalidInvoiceData(f"line_items[{i}]: expected a mapping")
        description = str(_require(item, "description", f"line_items[{i}]")).strip()
        amount = parse_amount(item.get("amount"), f"line_items[{i}].amount")
        line_items.append(LineItem(description=description, amount=amount))
    return line_items


def logo_reference(data: Mapping) -> Optional[str]:
    """The logo path or data URI referenced by an invoice mapping, if any.

    A malformed issuer section is left for ``invoice_from_dict`` to report.
    """
    issuer = data.get("issuer")
    logo = issuer.get("logo") if isinstance(issuer, Mapping) else None
    reference = logo or data.get("logoUrl")
    if not reference:
        return None
    if not isinstance(reference, str):
        raise InvalidInvoiceData(f"issuer.logo: expected a path or data URI, got {reference!r}")
    return reference


def invoice_from_dict(data: Mapping, logo: Optional[RasterImage] = None) -> InvoiceRecord:
    """
    Build an InvoiceRecord from a nested mapping.

    Expected shape:
        issuer: {name, address, tax_id?, logo?}
        client: {name, address}
        line_items: [{description, amount}, ...]
        tax: none | <CODE> | {option: ca, location: <CODE>}
        document_number: str
        issue_date: YYYY-MM-DD

    The logo itself is decoded by the caller and passed in ``logo``.
    """
    issuer_data = data.get("issuer")
    client_data = data.get("client")
    if not isinstance(issuer_data, Mapping) or not isinstance(client_data, Mapping):
        raise InvalidInvoiceData("issuer and client sections are required")

    tax_id = issuer_data.get("tax_id")
    issuer = Issuer(
        name=str(_require(issuer_data, "name", "issuer")).strip(),
        address=str(issuer_data.get("address") or "").strip(),
        tax_id=str(tax_id).strip() if tax_id else None,
        logo=logo,
    )
    client = Client(
        name=str(_require(client_data, "name", "client")).strip(),
        address=str(client_data.get("address") or "").strip(),
    )

    return InvoiceRecord(
        issuer=issuer,
        client=client,
        line_items=tuple(_parse_line_items(data.get("line_items", []))),
        tax_selection=parse_tax_selection(data.get("tax")),
        document_number=str(data.get("document_number") or "").strip(),
        issue_date=parse_date(_require(data, "issue_date", "invoice")),
    )


def load_invoice(path: Path, logo: Optional[RasterImage] = None) -> InvoiceRecord:
    """Read an invoice file straight into an InvoiceRecord."""
    return invoice_from_dict(read_invoice_file(path), logo=logo)


def invoice_from_document(doc: Mapping, logo: Optional[RasterImage] = None) -> InvoiceRecord:
    """Rebuild an InvoiceRecord from its stored form (see ``invoice_to_document``).

    Stored subtotal/tax/total values are ignored; they are recomputed on
    render.
    """
    nested = {
        "issuer": {
            "name": doc.get("businessName"),
            "address": doc.get("businessAddress"),
            "tax_id": doc.get("taxId"),
        },
        "client": {
            "name": doc.get("clientName"),
            "address": doc.get("clientAddress"),
        },
        "line_items": list(doc.get("services") or []),
        "tax": doc.get("taxInfo"),
        "document_number": doc.get("receiptNumber"),
        "issue_date": doc.get("paymentDate"),
    }
    return invoice_from_dict(nested, logo=logo)


def invoice_to_document(record: InvoiceRecord, totals: Optional[InvoiceTotals] = None) -> Dict[str, Any]:
    """
    Convert a record into the stored document shape used by the invoice store.

    Amounts are written as floats rounded to cents, matching what the
    store expects; the derived totals are included for listing views.
    """
    if totals is None:
        totals = compute_totals(record)

    if isinstance(record.tax_selection, Jurisdiction):
        tax_info: Dict[str, Any] = {
            "option": TAX_OPTION_CA,
            "location": record.tax_selection.code,
            "rate": float(totals.tax.rate),
            "amount": float(totals.tax.amount),
        }
    else:
        tax_info = {"option": TAX_OPTION_NONE}

    doc: Dict[str, Any] = {
        "businessName": record.issuer.name,
        "businessAddress": record.issuer.address,
        "clientName": record.client.name,
        "clientAddress": record.client.address,
        "receiptNumber": record.document_number,
        "paymentDate": record.issue_date.isoformat(),
        "services": [
            {"description": item.description, "amount": float(item.amount)}
            for item in record.line_items
        ],
        "subtotal": float(totals.subtotal),
        "taxInfo": tax_info,
        "totalAmount": float(totals.total),
    }
    if record.issuer.tax_id:
        doc["taxId"] = record.issuer.tax_id
    return doc


def invoice_to_dict(record: InvoiceRecord) -> Dict[str, Any]:
    """Nested mapping accepted by ``invoice_from_dict`` (logo omitted)."""
    if isinstance(record.tax_selection, Jurisdiction):
        tax: Any = {"option": TAX_OPTION_CA, "location": record.tax_selection.code}
    else:
        tax = TAX_OPTION_NONE
    issuer: Dict[str, Any] = {"name": record.issuer.name, "address": record.issuer.address}
    if record.issuer.tax_id:
        issuer["tax_id"] = record.issuer.tax_id
    return {
        "document_number": record.document_number,
        "issue_date": record.issue_date.isoformat(),
        "issuer": issuer,
        "client": {"name": record.client.name, "address": record.client.address},
        "line_items": [
            {"description": item.description, "amount": str(item.amount)}
            for item in record.line_items
        ],
        "tax": tax,
    }


def write_invoice_file(record: InvoiceRecord, path: Path) -> None:
    """Write a record as a YAML invoice file."""
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(invoice_to_dict(record), f, default_flow_style=False, sort_keys=False)
