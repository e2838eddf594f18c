"""Invoice input records consumed by the document composer."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple, Union

from .errors import InvalidLineItems
from .imaging import RasterImage


@dataclass(frozen=True)
class NoTax:
    """No tax is charged on the invoice."""


@dataclass(frozen=True)
class Jurisdiction:
    """Tax charged at the rate of a jurisdiction (province/territory code)."""
    code: str


TaxSelection = Union[NoTax, Jurisdiction]
NO_TAX = NoTax()


@dataclass(frozen=True)
class Issuer:
    """The business issuing the receipt."""
    name: str
    address: str
    tax_id: Optional[str] = None
    logo: Optional[RasterImage] = None


@dataclass(frozen=True)
class Client:
    """The party being billed."""
    name: str
    address: str


@dataclass(frozen=True)
class LineItem:
    """A single billed service."""
    description: str
    amount: Decimal


@dataclass(frozen=True)
class InvoiceRecord:
    """Immutable snapshot of one invoice/receipt.

    Line item order is rendering order. Tax is never stored here: it is
    derived from ``tax_selection`` and ``subtotal`` on every render.
    """
    issuer: Issuer
    client: Client
    line_items: Tuple[LineItem, ...]
    tax_selection: TaxSelection
    document_number: str
    issue_date: date

    @property
    def subtotal(self) -> Decimal:
        return sum((item.amount for item in self.line_items), Decimal("0"))

    @property
    def has_logo(self) -> bool:
        return self.issuer.logo is not None


def validate_line_items(line_items: Tuple[LineItem, ...]) -> None:
    """Reject an empty item list or any item with a negative amount."""
    if not line_items:
        raise InvalidLineItems("An invoice needs at least one line item")
    for index, item in enumerate(line_items):
        if item.amount < 0:
            raise InvalidLineItems(
                f"Line item {index} ({item.description!r}) has a negative amount: {item.amount}",
                index=index,
            )
