from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Protocol

from PIL import ImageFont

from stockview.models.record import DISPLAY_FIELDS, Record, RecordField
from stockview.services.errors import FontResolutionError
from stockview.utils.config import WidthConfig, load_width_config
from stockview.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Widths are compared as integer thousandths of a pixel.
WIDTH_SCALE = 1000


class TextMeasurer(Protocol):
    def measure(self, text: str, size: float) -> float:
        """Return the rendered advance width of ``text`` at ``size``."""
        ...


class FontTextMeasurer:
    """Measure text with the glyph advances of a TrueType font via Pillow.

    The font is resolved on first use and cached per size. Pillow searches the
    platform font directories when ``font_family`` is a bare name such as
    ``"Arial"``.
    """

    def __init__(self, font_family: str) -> None:
        self.font_family = font_family
        self._fonts: dict[float, ImageFont.FreeTypeFont] = {}
        self._lock = threading.Lock()

    def _font(self, size: float) -> ImageFont.FreeTypeFont:
        with self._lock:
            font = self._fonts.get(size)
            if font is None:
                try:
                    font = ImageFont.truetype(self.font_family, size)
                except OSError as error:
                    raise FontResolutionError(
                        f"Could not load font '{self.font_family}': {error}"
                    ) from error
                self._fonts[size] = font
            return font

    def measure(self, text: str, size: float) -> float:
        return self._font(size).getlength(text)


def measured_width(measurer: TextMeasurer, text: str, size: float) -> int:
    return int(measurer.measure(text, size) * WIDTH_SCALE)


def widest_value(
    records: Sequence[Record],
    name: RecordField,
    measurer: TextMeasurer,
    size: float,
) -> object:
    """Value of ``name`` that renders widest; the first one wins on ties."""
    widths: dict[str, int] = {}
    best: object = None
    best_width = -1
    for record in records:
        text = record.text_of(name)
        width = widths.get(text)
        if width is None:
            width = widths[text] = measured_width(measurer, text, size)
        if width > best_width:
            best, best_width = record.value_of(name), width
    return best


def estimate_column_widths(
    records: Sequence[Record],
    measurer: TextMeasurer,
    *,
    size: float,
) -> Record:
    """Build a width hint: a Record holding the widest value of every column."""
    if not records:
        return Record.empty()
    values = {name.value: widest_value(records, name, measurer, size) for name in DISPLAY_FIELDS}
    return Record(**values)


def build_default_measurer(config: WidthConfig | None = None) -> tuple[TextMeasurer, float]:
    resolved = config or load_width_config()
    LOGGER.debug("Using %s at %spx for column width hints", resolved.font_family, resolved.font_size)
    return FontTextMeasurer(resolved.font_family), resolved.font_size
