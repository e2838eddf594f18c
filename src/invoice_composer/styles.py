"""Visual style profiles for rendered receipts."""

from dataclasses import dataclass
from typing import Dict
from reportlab.lib.colors import Color, black, white, HexColor


@dataclass(frozen=True)
class DocumentStyle:
    """Visual style profile for a receipt."""
    name: str
    font_family: str  # Base font name (Helvetica, Times-Roman, Courier)
    issuer_font_size: int  # Business name
    title_font_size: int  # Document title ("RECEIPT")
    body_font_size: int
    label_font_size: int  # Small-caps section labels ("BILL TO")
    table_font_size: int
    text_color: Color
    muted_color: Color  # Section labels
    header_bg_color: Color
    header_text_color: Color
    stripe_color: Color  # Fill for every other body row
    striped: bool


STYLES: Dict[str, DocumentStyle] = {
    "default": DocumentStyle(
        name="default",
        font_family="Helvetica",
        issuer_font_size=18,
        title_font_size=14,
        body_font_size=10,
        label_font_size=8,
        table_font_size=10,
        text_color=black,
        muted_color=HexColor("#646464"),
        header_bg_color=HexColor("#468090"),  # Teal
        header_text_color=white,
        stripe_color=HexColor("#F5F5F5"),
        striped=True,
    ),
    "classic": DocumentStyle(
        name="classic",
        font_family="Times-Roman",
        issuer_font_size=18,
        title_font_size=14,
        body_font_size=10,
        label_font_size=8,
        table_font_size=10,
        text_color=black,
        muted_color=HexColor("#555555"),
        header_bg_color=HexColor("#E0E0E0"),
        header_text_color=black,
        stripe_color=white,
        striped=False,
    ),
    "mono": DocumentStyle(
        name="mono",
        font_family="Courier",
        issuer_font_size=16,
        title_font_size=13,
        body_font_size=9,
        label_font_size=8,
        table_font_size=9,
        text_color=black,
        muted_color=HexColor("#777777"),
        header_bg_color=HexColor("#333333"),
        header_text_color=white,
        stripe_color=HexColor("#EEEEEE"),
        striped=True,
    ),
}


def get_style(style_name: str) -> DocumentStyle:
    """Get a style profile by name, falling back to the default style."""
    return STYLES.get(style_name, STYLES["default"])


def get_bold_font(font_family: str) -> str:
    """Get the bold variant of a font family."""
    if font_family == "Times-Roman":
        return "Times-Bold"
    elif font_family == "Courier":
        return "Courier-Bold"
    else:
        return f"{font_family}-Bold"
