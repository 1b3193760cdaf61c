"""Google Slides request serializer.

Turns the drawing ops from :mod:`slide_compiler.gslide_codegen` into the
request dicts accepted by ``presentations.batchUpdate``.

Design notes
------------
1.  Ops map one-to-one onto requests; nothing is reordered, so the request
    list keeps the per-slide grouping of the op stream.
2.  Sizes and positions are sent in PT with an identity transform.
3.  **Batching** - :func:`batch_requests` splits the list into chunks of 100
    (the API limit). Sending them is left to the caller.
4.  Draw-op ranges count code points; the API counts UTF-16 code units, so
    every ``FIXED_RANGE`` is converted against the text inserted into the
    same object.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Sequence

from .gslide_codegen import DrawOp, Opcode, TextRange

logger = logging.getLogger(__name__)

BATCH_SIZE = 100

# Codegen style keys -> Slides TextStyle field names
_TEXT_STYLE_FIELDS = {
    "font_family": "fontFamily",
    "font_size_pt": "fontSize",
    "color": "foregroundColor",
    "bold": "bold",
}


# ---------------------------------------------------------------------------
# Helper utilities
# ---------------------------------------------------------------------------

def _hex_to_rgb_dict(hex_color: str) -> Dict[str, float]:
    """Convert #rrggbb → {'red': R, 'green': G, 'blue': B} in 0-1 range."""
    hex_color = hex_color.lstrip("#")
    if len(hex_color) == 3:  # short form #f00
        hex_color = "".join(c * 2 for c in hex_color)
    r, g, b = (int(hex_color[i : i + 2], 16) / 255 for i in (0, 2, 4))
    return {"red": r, "green": g, "blue": b}


def _solid_fill(hex_color: str) -> Dict[str, Any]:
    return {"solidFill": {"color": {"rgbColor": _hex_to_rgb_dict(hex_color)}}}


def _utf16_offset(text: str, index: int) -> int:
    """Code-point offset into *text* -> UTF-16 code-unit offset."""
    # Past the known text every character counts as one unit
    return len(text[:index].encode("utf-16-le")) // 2 + max(0, index - len(text))


def _text_range(text_range: TextRange = None, text: str = "") -> Dict[str, Any]:
    if text_range is None:
        return {"type": "ALL"}
    return {
        "type": "FIXED_RANGE",
        "startIndex": _utf16_offset(text, text_range.start),
        "endIndex": _utf16_offset(text, text_range.end),
    }


def _element_properties(op: DrawOp) -> Dict[str, Any]:
    """Standard element properties for a shape placed in PT."""
    box = op.box
    return {
        "pageObjectId": op.page_id,
        "size": {
            "width": {"magnitude": box.width, "unit": "PT"},
            "height": {"magnitude": box.height, "unit": "PT"},
        },
        "transform": {
            "scaleX": 1,
            "scaleY": 1,
            "translateX": box.x,
            "translateY": box.y,
            "unit": "PT",
        },
    }


def _text_style(style: Dict[str, Any]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    fields: List[str] = []
    for key, value in style.items():
        if key not in _TEXT_STYLE_FIELDS:
            continue
        name = _TEXT_STYLE_FIELDS[key]
        if key == "font_size_pt":
            value = {"magnitude": value, "unit": "PT"}
        elif key == "color":
            value = {"opaqueColor": {"rgbColor": _hex_to_rgb_dict(value)}}
        payload[name] = value
        fields.append(name)
    return {"style": payload, "fields": ",".join(fields)}


# ---------------------------------------------------------------------------
# Op -> request mapping
# ---------------------------------------------------------------------------

class SlidesRequestBuilder:
    """
    Convert a drawing-op stream into Slides API requests.

    ``setFill`` targets either a slide (``updatePageProperties``) or a shape
    (``updateShapeProperties``); the builder remembers which ids are pages.
    """

    def __init__(self, *, debug: bool = False) -> None:
        self.debug = debug

    def build(self, ops: Iterable[DrawOp]) -> List[Dict[str, Any]]:
        requests: List[Dict[str, Any]] = []
        pages = set()
        shape_props: Dict[str, Dict[str, Any]] = {}
        texts: Dict[str, str] = {}
        for op in ops:
            if op.op is Opcode.CREATE_SURFACE:
                pages.add(op.object_id)
                requests.append({
                    "createSlide": {
                        "objectId": op.object_id,
                        "insertionIndex": len(pages) - 1,
                        "slideLayoutReference": {"predefinedLayout": "BLANK"},
                    }
                })
            elif op.op is Opcode.SET_FILL and op.object_id in pages:
                requests.append({
                    "updatePageProperties": {
                        "objectId": op.object_id,
                        "pageProperties": {"pageBackgroundFill": _solid_fill(op.color)},
                        "fields": "pageBackgroundFill.solidFill.color",
                    }
                })
            elif op.op is Opcode.SET_FILL:
                props = {"shapeBackgroundFill": _solid_fill(op.color)}
                fields = ["shapeBackgroundFill.solidFill.color"]
                if shape_props.get(op.object_id, {}).get("outline") is False:
                    props["outline"] = {"propertyState": "NOT_RENDERED"}
                    fields.append("outline")
                requests.append({
                    "updateShapeProperties": {
                        "objectId": op.object_id,
                        "shapeProperties": props,
                        "fields": ",".join(fields),
                    }
                })
            elif op.op is Opcode.CREATE_SHAPE:
                shape_props[op.object_id] = dict(op.style)
                requests.append({
                    "createShape": {
                        "objectId": op.object_id,
                        "shapeType": op.shape_type.value,
                        "elementProperties": _element_properties(op),
                    }
                })
                if op.style.get("content_alignment"):
                    requests.append({
                        "updateShapeProperties": {
                            "objectId": op.object_id,
                            "shapeProperties": {"contentAlignment": op.style["content_alignment"]},
                            "fields": "contentAlignment",
                        }
                    })
            elif op.op is Opcode.INSERT_TEXT:
                texts[op.object_id] = op.text + texts.get(op.object_id, "")
                requests.append({
                    "insertText": {"objectId": op.object_id, "insertionIndex": 0, "text": op.text}
                })
            elif op.op is Opcode.APPLY_TEXT_STYLE:
                request = {
                    "objectId": op.object_id,
                    "textRange": _text_range(op.text_range, texts.get(op.object_id, "")),
                }
                request.update(_text_style(dict(op.style)))
                requests.append({"updateTextStyle": request})
            elif op.op is Opcode.APPLY_PARAGRAPH_STYLE:
                requests.append({
                    "updateParagraphStyle": {
                        "objectId": op.object_id,
                        "textRange": _text_range(op.text_range, texts.get(op.object_id, "")),
                        "style": {"alignment": op.style.get("alignment", "START")},
                        "fields": "alignment",
                    }
                })
            elif op.op is Opcode.APPLY_BULLET_STYLE:
                requests.append({
                    "createParagraphBullets": {
                        "objectId": op.object_id,
                        "textRange": _text_range(op.text_range, texts.get(op.object_id, "")),
                        "bulletPreset": op.style.get("preset", "BULLET_DISC_CIRCLE_SQUARE"),
                    }
                })
            else:  # pragma: no cover - exhaustive over Opcode
                raise ValueError(f"Unsupported op: {op.op!r}")

        if self.debug:
            logger.info(f"Built {len(requests)} Slides requests for {len(pages)} slides")
        return requests


def to_slides_requests(ops: Iterable[DrawOp], debug: bool = False) -> List[Dict[str, Any]]:
    return SlidesRequestBuilder(debug=debug).build(ops)


def batch_requests(requests: Sequence[Dict[str, Any]], size: int = BATCH_SIZE) -> Iterator[List[Dict[str, Any]]]:
    """Yield chunks of at most *size* requests, one per ``batchUpdate`` call."""
    if size <= 0:
        raise ValueError(f"Batch size must be positive, got {size}")
    for i in range(0, len(requests), size):
        yield list(requests[i : i + size])
