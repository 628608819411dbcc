from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from domain.models import Box, LabelPlacement, Point, Size

BASE_FONT_PX = 16.0
GLYPH_WIDTH_RATIO = 0.6
ASCENT_RATIO = 0.8
ELLIPSIS = "..."

_FONT_SIZE_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(em|rem|px|pt)?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class LabelCandidate:
    role: str
    owner_id: str
    text: str
    anchor: str
    position: Point
    font_size: str


def font_size_px(font_size: str | float | int) -> float:
    if isinstance(font_size, (int, float)):
        return float(font_size)
    match = _FONT_SIZE_RE.match(str(font_size))
    if not match:
        return BASE_FONT_PX
    value = float(match.group(1))
    unit = (match.group(2) or "px").lower()
    if unit in {"em", "rem"}:
        return value * BASE_FONT_PX
    if unit == "pt":
        return value * 4 / 3
    return value


def truncate_label(text: str, max_chars: int) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + ELLIPSIS
    return text


def estimate_text_box(text: str, position: Point, font_size: str, anchor: str) -> Box:
    px = font_size_px(font_size)
    width = len(text) * px * GLYPH_WIDTH_RATIO
    left = position.x
    if anchor == "middle":
        left -= width / 2
    elif anchor == "end":
        left -= width
    # position.y is the text baseline
    return Box(Point(left, position.y - px * ASCENT_RATIO), Size(width, px))


def declutter(candidates: Iterable[LabelCandidate]) -> list[LabelPlacement]:
    """Keep labels in the given order, dropping any whose box hits an already kept one."""
    kept: list[LabelPlacement] = []
    for candidate in candidates:
        if not candidate.text:
            continue
        box = estimate_text_box(
            candidate.text, candidate.position, candidate.font_size, candidate.anchor
        )
        if any(box.overlaps(label.box) for label in kept):
            continue
        kept.append(
            LabelPlacement(
                role=candidate.role,
                owner_id=candidate.owner_id,
                text=candidate.text,
                anchor=candidate.anchor,
                position=candidate.position,
                box=box,
                font_size=candidate.font_size,
            )
        )
    return kept
