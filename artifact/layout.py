# artifact/layout.py
"""
Declarative layout of the artifact preview image.

The preview is described as fixed regions (title, original-text box, symbol
box, footer) on a square canvas. Any rendering backend can consume a
PreviewLayout; nothing here touches a drawing surface.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from utils.constants import (
    DEFAULT_FOOTER,
    ELLIPSIS,
    PREVIEW_CANVAS_SIZE,
    PREVIEW_SYMBOLS_PER_LINE,
    PREVIEW_TRUNCATE_AT,
    PREVIEW_VISIBLE_CHARS,
)

PREVIEW_TITLE = "Celo Emoji NFT"


class Theme(Enum):
    """Preview colour theme"""
    LIGHT = "light"
    DARK = "dark"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def coerce(cls, value: Union["Theme", str, bool, None]) -> "Theme":
        """Accept a Theme, its name/value, or an is-dark-mode flag"""
        if isinstance(value, Theme):
            return value
        if value is None:
            return cls.LIGHT
        if isinstance(value, bool):
            return cls.DARK if value else cls.LIGHT
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown theme '{value}'. Expected one of: light, dark") from None


@dataclass(frozen=True)
class Palette:
    gradient_start: str
    gradient_end: str
    title: str
    panel: str = "#ffffff"
    panel_alpha: float = 0.95
    label: str = "#374151"
    text_box: str = "#f3f4f6"
    text: str = "#1f2937"
    symbol_box: str = "#ffffff"
    symbols: str = "#1f2937"
    footer: str = "#6b7280"


PALETTES = {
    Theme.LIGHT: Palette(gradient_start="#10b981", gradient_end="#059669", title="#059669"),
    Theme.DARK: Palette(gradient_start="#1f2937", gradient_end="#111827", title="#10b981"),
}


@dataclass(frozen=True)
class Gradient:
    """Diagonal linear gradient from the top-left to the bottom-right corner"""
    start: str
    end: str


@dataclass(frozen=True)
class BoxRegion:
    name: str
    x: float
    y: float
    width: float
    height: float
    radius: float
    fill: str
    alpha: float = 1.0


@dataclass(frozen=True)
class TextRegion:
    """Text anchored at (x, y) on its baseline"""
    name: str
    text: str
    x: float
    y: float
    font_size: float  # px
    color: str
    family: str = "sans-serif"
    bold: bool = False
    align: str = "center"


@dataclass(frozen=True)
class PreviewLayout:
    width: int
    height: int
    theme: Theme
    background: Gradient
    boxes: Tuple[BoxRegion, ...]
    texts: Tuple[TextRegion, ...]

    def box(self, name: str) -> Optional[BoxRegion]:
        return next((b for b in self.boxes if b.name == name), None)

    def text(self, name: str) -> Optional[TextRegion]:
        return next((t for t in self.texts if t.name == name), None)

    def texts_named(self, prefix: str) -> List[TextRegion]:
        return [t for t in self.texts if t.name.startswith(prefix)]


def truncate_for_display(
    text: str,
    limit: int = PREVIEW_TRUNCATE_AT,
    visible: int = PREVIEW_VISIBLE_CHARS,
) -> str:
    """Shorten text for the image only; stored values are never truncated"""
    if len(text) > limit:
        return text[:visible] + ELLIPSIS
    return text


def wrap_symbols(encoded: str, width: int = PREVIEW_SYMBOLS_PER_LINE) -> List[str]:
    """Split the encoded text into display lines of up to ``width`` characters"""
    lines = re.findall(r".{1,%d}" % width, encoded)
    return lines or [encoded]


def build_preview_layout(
    original_text: str,
    encoded_text: str,
    theme: Union[Theme, str, bool, None] = Theme.LIGHT,
    size: int = PREVIEW_CANVAS_SIZE,
    footer: str = DEFAULT_FOOTER,
    title: str = PREVIEW_TITLE,
) -> PreviewLayout:
    """
    Describe the preview image for a translation.

    Coordinates are expressed for an 800px canvas and scaled to ``size``.
    """
    theme = Theme.coerce(theme)
    palette = PALETTES[theme]
    s = size / 800.0
    center = size / 2

    boxes = (
        BoxRegion("panel", 50 * s, 50 * s, size - 100 * s, size - 100 * s, 25 * s,
                  palette.panel, palette.panel_alpha),
        BoxRegion("original_box", 100 * s, 240 * s, size - 200 * s, 80 * s, 10 * s, palette.text_box),
        BoxRegion("symbol_box", 100 * s, 400 * s, size - 200 * s, 280 * s, 10 * s, palette.symbol_box),
    )

    texts = [
        TextRegion("title", title, center, 150 * s, 48 * s, palette.title, bold=True),
        TextRegion("original_label", "Original Text:", center, 220 * s, 24 * s, palette.label),
        TextRegion("original_text", f'"{truncate_for_display(original_text)}"', center, 290 * s,
                   28 * s, palette.text, family="monospace"),
        TextRegion("symbol_label", "Emoji Translation:", center, 380 * s, 24 * s, palette.label),
    ]
    for index, line in enumerate(wrap_symbols(encoded_text)):
        texts.append(
            TextRegion(f"symbols_{index}", line, center, (480 + index * 80) * s, 72 * s, palette.symbols)
        )
    texts.append(TextRegion("footer", footer, center, 750 * s, 18 * s, palette.footer, family="monospace"))

    return PreviewLayout(
        width=size,
        height=size,
        theme=theme,
        background=Gradient(palette.gradient_start, palette.gradient_end),
        boxes=boxes,
        texts=tuple(texts),
    )
