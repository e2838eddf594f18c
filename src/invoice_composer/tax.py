"""Jurisdictional tax rates, tax computation and money formatting."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Tuple

from .errors import UnknownJurisdiction
from .models import InvoiceRecord, Jurisdiction, NoTax, TaxSelection

CENT = Decimal("0.01")
NO_TAX_LABEL = "No Tax"

# Canadian sales tax (GST/HST/PST combined) by province/territory code
TAX_TABLE: Dict[str, Decimal] = {
    "AB": Decimal("0.05"),
    "BC": Decimal("0.12"),
    "MB": Decimal("0.12"),
    "NB": Decimal("0.15"),
    "NL": Decimal("0.15"),
    "NT": Decimal("0.05"),
    "NS": Decimal("0.15"),
    "NU": Decimal("0.05"),
    "ON": Decimal("0.13"),
    "PE": Decimal("0.15"),
    "QC": Decimal("0.14975"),
    "SK": Decimal("0.11"),
    "YT": Decimal("0.05"),
}


@dataclass(frozen=True)
class TaxResult:
    """Computed tax for one invoice."""
    amount: Decimal
    label: str
    rate: Decimal = Decimal("0")
    code: str = ""


@dataclass(frozen=True)
class InvoiceTotals:
    """Subtotal, tax and grand total derived from an invoice record."""
    subtotal: Decimal
    tax: TaxResult
    total: Decimal

    @property
    def has_tax_line(self) -> bool:
        return self.tax.amount > 0


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(value: Decimal, symbol: str = "$") -> str:
    """Format a money value with a fixed symbol and exactly two decimals."""
    return f"{symbol}{round_money(value):.2f}"


def lookup_rate(code: str) -> Decimal:
    """Return the tax rate for a jurisdiction code."""
    try:
        return TAX_TABLE[code]
    except KeyError:
        raise UnknownJurisdiction(code) from None


def rate_display_places(rate: Decimal) -> int:
    """Number of decimals used when showing a rate as a percentage.

    Three when the stored rate's third decimal digit is non-zero (QC's
    14.975%), otherwise 0 for whole percentages and 1 for the rest.
    """
    third_digit = int((rate * 1000) % 10)
    if third_digit != 0:
        return 3
    percent = rate * 100
    if percent == percent.to_integral_value():
        return 0
    return 1


def format_rate_percent(rate: Decimal) -> str:
    """Format a rate as a percentage number without the % sign."""
    places = rate_display_places(rate)
    percent = (rate * 100).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return f"{percent:.{places}f}"


def compute_tax(subtotal: Decimal, selection: TaxSelection) -> TaxResult:
    """Compute the tax amount and its display label.

    Raises UnknownJurisdiction when the selected code is not in TAX_TABLE.
    """
    if isinstance(selection, NoTax):
        return TaxResult(amount=Decimal("0.00"), label=NO_TAX_LABEL)

    if not isinstance(selection, Jurisdiction):
        raise TypeError(f"Unsupported tax selection: {selection!r}")

    rate = lookup_rate(selection.code)
    amount = round_money(Decimal(subtotal) * rate)
    label = f"Tax ({selection.code} @ {format_rate_percent(rate)}%)"
    return TaxResult(amount=amount, label=label, rate=rate, code=selection.code)


def compute_totals(record: InvoiceRecord) -> InvoiceTotals:
    """Recompute subtotal, tax and total from the record."""
    subtotal = round_money(record.subtotal)
    tax = compute_tax(subtotal, record.tax_selection)
    return InvoiceTotals(subtotal=subtotal, tax=tax, total=subtotal + tax.amount)


def jurisdiction_choices() -> List[Tuple[str, str]]:
    """(code, label) pairs for a jurisdiction picker, e.g. ("ON", "ON (13%)")."""
    return [
        (code, f"{code} ({format_rate_percent(rate)}%)")
        for code, rate in TAX_TABLE.items()
    ]
