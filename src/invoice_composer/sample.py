"""Generate realistic sample invoice records for demos and tests."""

from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional
import numpy as np
from faker import Faker

from .models import NO_TAX, Client, InvoiceRecord, Issuer, Jurisdiction, LineItem, TaxSelection
from .tax import TAX_TABLE

# Service descriptions a small business typically bills for
SERVICE_TEMPLATES = [
    "{hours}h consulting - {topic}",
    "Website maintenance ({month})",
    "Bookkeeping services ({month})",
    "Logo design - {n} concepts",
    "Photography session, {hours} hours",
    "Social media management ({month})",
    "On-site support visit",
    "Copywriting: {topic}",
    "Monthly software subscription",
    "Equipment rental - {n} days",
    "Training workshop: {topic}",
    "Travel expenses",
]

TOPICS = [
    "brand strategy", "tax preparation", "product launch", "inventory setup",
    "payroll onboarding", "marketing plan", "network configuration", "menu redesign",
]

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def generate_document_number(rng: np.random.Generator) -> str:
    """Generate a receipt number like RCPT-48213."""
    return f"RCPT-{rng.integers(10000, 99999)}"


def generate_tax_id(rng: np.random.Generator) -> Optional[str]:
    """Generate a business number (HST/GST style) ~60% of the time."""
    if rng.random() < 0.6:
        return f"{rng.integers(100000000, 999999999)} RT0001"
    return None


def generate_description(rng: np.random.Generator) -> str:
    template = str(rng.choice(SERVICE_TEMPLATES))
    return template.format(
        hours=int(rng.integers(1, 12)),
        topic=str(rng.choice(TOPICS)),
        month=str(rng.choice(MONTHS)),
        n=int(rng.integers(2, 6)),
    )


def generate_amount(rng: np.random.Generator) -> Decimal:
    """Log-normal amounts: mostly tens to hundreds, occasionally thousands."""
    value = float(rng.lognormal(mean=5.0, sigma=0.9))
    return Decimal(f"{min(value, 25000.0):.2f}")


def generate_tax_selection(rng: np.random.Generator) -> TaxSelection:
    """Pick no tax ~25% of the time, otherwise a random jurisdiction."""
    if rng.random() < 0.25:
        return NO_TAX
    return Jurisdiction(str(rng.choice(sorted(TAX_TABLE))))


def generate_line_items(rng: np.random.Generator, num_items: int) -> List[LineItem]:
    return [
        LineItem(description=generate_description(rng), amount=generate_amount(rng))
        for _ in range(num_items)
    ]


def generate_sample_invoice(
    rng: np.random.Generator,
    fake: Optional[Faker] = None,
    num_items: Optional[int] = None,
    issue_date: Optional[date] = None,
) -> InvoiceRecord:
    """
    Generate a single sample invoice record.

    Args:
        rng: Random number generator (drives every random choice)
        fake: Faker instance; seeded from ``rng`` when omitted
        num_items: Number of line items (1-8 when omitted)
        issue_date: Issue date (a date within the last 60 days of 2025 when omitted)
    """
    if fake is None:
        fake = Faker("en_CA")
        fake.seed_instance(int(rng.integers(0, 2**31)))

    if num_items is None:
        num_items = int(rng.integers(1, 9))

    if issue_date is None:
        issue_date = date(2025, 12, 31) - timedelta(days=int(rng.integers(0, 60)))

    issuer = Issuer(
        name=fake.company(),
        address=f"{fake.street_address()}\n{fake.city()}, {fake.province_abbr()} {fake.postalcode()}",
        tax_id=generate_tax_id(rng),
    )
    client = Client(
        name=fake.name(),
        address=f"{fake.street_address()}\n{fake.city()}, {fake.province_abbr()} {fake.postalcode()}",
    )

    return InvoiceRecord(
        issuer=issuer,
        client=client,
        line_items=tuple(generate_line_items(rng, num_items)),
        tax_selection=generate_tax_selection(rng),
        document_number=generate_document_number(rng),
        issue_date=issue_date,
    )


def generate_sample_invoices(count: int, seed: int = 42, num_items: Optional[int] = None) -> List[InvoiceRecord]:
    """Generate ``count`` sample invoices from one seed."""
    rng = np.random.default_rng(seed)
    fake = Faker("en_CA")
    fake.seed_instance(int(rng.integers(0, 2**31)))
    records = []
    seen = set()
    while len(records) < count:
        record = generate_sample_invoice(rng, fake, num_items=num_items)
        # Receipt numbers name the output files
        if record.document_number in seen:
            continue
        seen.add(record.document_number)
        records.append(record)
    return records
