"""Page geometry and the vertical layout cursor used while composing pages."""

import logging
from dataclasses import dataclass
from enum import Enum

from .errors import LayoutError

logger = logging.getLogger(__name__)

# Page dimensions in millimetres
A4_SIZE = (210.0, 297.0)
DEFAULT_MARGIN = 15.0


@dataclass(frozen=True)
class PageLayout:
    """Defines the geometry of a page. All values are millimetres from the top-left corner."""
    page_width: float = A4_SIZE[0]
    page_height: float = A4_SIZE[1]
    margin: float = DEFAULT_MARGIN

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def content_start_x(self) -> float:
        return self.margin

    @property
    def content_end_x(self) -> float:
        """Right edge of the printable area."""
        return self.page_width - self.margin

    @property
    def content_start_y(self) -> float:
        """Top of the printable area."""
        return self.margin

    @property
    def content_end_y(self) -> float:
        """Lowest y a block may reach before the page must break."""
        return self.page_height - self.margin


class CursorState(Enum):
    """Layout cursor states."""
    ACTIVE = "active"
    SHOULD_BREAK = "should_break"


class LayoutCursor:
    """Tracks where on the page the next block is drawn.

    ``y`` grows downwards from the top of the page. Advancing past the
    printable area moves the cursor to SHOULD_BREAK; the caller must then
    call ``break_page()`` before drawing the next block.
    """

    def __init__(self, page_height: float, margin: float):
        if page_height <= 2 * margin:
            raise LayoutError(
                f"Page height {page_height} leaves no printable area with margin {margin}"
            )
        self.page_height = page_height
        self.margin = margin
        self.page_index = 0
        self.y = margin
        self._state = CursorState.ACTIVE

    @classmethod
    def for_layout(cls, layout: PageLayout) -> "LayoutCursor":
        return cls(page_height=layout.page_height, margin=layout.margin)

    @property
    def limit(self) -> float:
        return self.page_height - self.margin

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def should_break(self) -> bool:
        return self._state is CursorState.SHOULD_BREAK

    def remaining(self) -> float:
        """Printable height left below the cursor on the current page."""
        return max(0.0, self.limit - self.y)

    def advance(self, height: float) -> CursorState:
        """Move the cursor down by ``height`` and return the new state."""
        if height < 0:
            raise LayoutError(f"Cannot advance by a negative height ({height})")
        self.y += height
        if self.y > self.limit:
            self._state = CursorState.SHOULD_BREAK
        return self._state

    def advance_to(self, y: float) -> CursorState:
        """Move the cursor down to an absolute position on the current page."""
        if y < self.y:
            raise LayoutError(f"Cannot move the cursor back from {self.y} to {y}")
        return self.advance(y - self.y)

    def break_page(self) -> int:
        """Continue on a new page and return its index."""
        if self._state is not CursorState.SHOULD_BREAK:
            raise LayoutError(
                f"break_page() called on page {self.page_index} while the cursor is active (y={self.y})"
            )
        self.page_index += 1
        self.y = self.margin
        self._state = CursorState.ACTIVE
        logger.debug("Page break: continuing on page %d", self.page_index)
        return self.page_index

    def __repr__(self) -> str:
        return (
            f"LayoutCursor(page_index={self.page_index}, y={self.y:.2f}, "
            f"limit={self.limit:.2f}, state={self._state.value})"
        )
