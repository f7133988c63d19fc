"""Render blueprint JSON as an SVG document.

Each room becomes an unfilled rectangle plus a text label placed just
inside its top-left corner, drawn in input order on a fixed-size canvas.
"""

from __future__ import annotations

import re
from typing import List
from xml.sax.saxutils import escape

from blueprint.constants import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    LABEL_FONT_SIZE,
    LABEL_OFFSET_X,
    LABEL_OFFSET_Y,
    ROOM_FILL,
    ROOM_STROKE,
    ROOM_STROKE_WIDTH,
    SVG_NAMESPACE,
)
from blueprint.schema import Blueprint, Room, parse_blueprint

SVG_OPEN = f'<svg width="{CANVAS_WIDTH}" height="{CANVAS_HEIGHT}" xmlns="{SVG_NAMESPACE}">'
SVG_CLOSE = "</svg>"

# Characters outside the XML 1.0 Char production
_XML_INVALID = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def format_number(value: float) -> str:
    """Format a coordinate without a unit suffix or fixed precision.

    Integral values drop the trailing ``.0``; everything else uses the
    shortest repr that reads back to the same float.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _label_text(name: str) -> str:
    return escape(_XML_INVALID.sub("\ufffd", name))


def _room_elements(room: Room) -> List[str]:
    rect = (
        f'<rect x="{format_number(room.x)}" y="{format_number(room.y)}" '
        f'width="{format_number(room.width)}" height="{format_number(room.height)}" '
        f'fill="{ROOM_FILL}" stroke="{ROOM_STROKE}" stroke-width="{ROOM_STROKE_WIDTH}"/>'
    )
    label = (
        f'<text x="{format_number(room.x + LABEL_OFFSET_X)}" '
        f'y="{format_number(room.y + LABEL_OFFSET_Y)}" '
        f'font-size="{LABEL_FONT_SIZE}">{_label_text(room.name)}</text>'
    )
    return [rect, label]


def render_svg(blueprint: Blueprint) -> str:
    """Format an already validated blueprint as SVG text."""
    lines = [SVG_OPEN]
    for room in blueprint.rooms:
        lines.extend(f"  {el}" for el in _room_elements(room))
    lines.append(SVG_CLOSE)
    return "\n".join(lines)


def render_blueprint(json_data: str) -> str:
    """Parse blueprint JSON and return the complete SVG document.

    Raises:
        InvalidBlueprintError: if ``json_data`` is not valid JSON or does not
            have the ``{"rooms": [{name, x, y, width, height}, ...]}`` shape.
            No partial document is produced.
    """
    return render_svg(parse_blueprint(json_data))
