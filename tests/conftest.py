from datetime import date
from decimal import Decimal

import numpy as np
import pytest


@pytest.fixture
def logo():
    """A wide 400x150 RGB logo; fits the 40x15 mm box exactly."""
    from invoice_composer.imaging import RasterImage

    pixels = np.zeros((150, 400, 3), dtype=np.uint8)
    pixels[:, :, 2] = 200
    return RasterImage(pixels=pixels)


@pytest.fixture
def make_record():
    """Factory for invoice records with sensible defaults."""
    from invoice_composer.models import (
        NO_TAX, Client, InvoiceRecord, Issuer, Jurisdiction, LineItem,
    )

    def _make(
        amounts=("100.00",),
        tax=NO_TAX,
        logo=None,
        tax_id=None,
        number="R-1001",
        issue_date=date(2025, 3, 5),
    ):
        if isinstance(tax, str):
            tax = Jurisdiction(tax)
        items = tuple(
            LineItem(description=f"Service {i + 1}", amount=Decimal(str(a)))
            for i, a in enumerate(amounts)
        )
        return InvoiceRecord(
            issuer=Issuer(
                name="Maple Leaf Consulting",
                address="12 King St W\nToronto, ON M5H 1A1",
                tax_id=tax_id,
                logo=logo,
            ),
            client=Client(name="Jordan Smith", address="400 Queen St\nOttawa, ON K1A 0A9"),
            line_items=items,
            tax_selection=tax,
            document_number=number,
            issue_date=issue_date,
        )

    return _make


@pytest.fixture
def config():
    from invoice_composer.config import ComposerConfig

    return ComposerConfig()
