import re
from typing import List

from bs4 import Tag

from ..dom.core import PassContext, PassDefinition, PassResult, pass_spec

_TAG = re.compile(r'<[^>]+>')

# Entities decoded before the endings are compared
ENTITY_GLYPHS = (
    ("&reg;", "®"),
    ("&rsquo;", "’"),
    ("&trade;", "™"),
    ("&bull;", "•"),
    ("&dagger;", "†"),
    ("&#8226;", "•"),
    ("&#9702;", "◦"),
    ("&#9744;", "☐"),
)

# Cells ending with one of these are complete as they are.
# Closed list maintained by the copy editors; do not extend it with "similar" symbols.
OMIT_ENDINGS = (
    "•", "†", "*", "™", "◦", "☐", "—", "‐", ":", ",", ";",
    '"', "“", "”", "¿", "?", "!", "¡", "@",
    "0", "1", "2", "3", "4", "5", "6", "7", "8", "9",
)

OMIT_ENTITIES = (
    "&#8226;", "&bull;", "&dagger;", "&trade;", "&#9702;", "&#9744;", "&mdash;", "&dash;",
)


def decode_entities(text: str) -> str:
    for entity, glyph in ENTITY_GLYPHS:
        text = text.replace(entity, glyph)
    return text


def cell_text(td: Tag) -> str:
    """Inner markup with tags stripped and non-breaking spaces turned into spaces."""
    text = _TAG.sub("", td.decode_contents())
    return text.replace("&nbsp;", " ").replace("\xa0", " ").strip()


def is_excluded(raw: str, decoded: str) -> bool:
    """True when the cell needs no terminal period."""
    if decoded.endswith("."):
        return True

    trimmed = decoded.rstrip()
    raw_trimmed = raw.rstrip()

    for symbol in OMIT_ENDINGS:
        if decoded == symbol or trimmed.endswith(symbol):
            return True

    for entity in OMIT_ENTITIES:
        glyph = decode_entities(entity)
        if raw == entity or decoded == glyph:
            return True
        if trimmed.endswith(glyph) or raw_trimmed.endswith(entity):
            return True

    return False


@pass_spec(fields=["tds_without_period"])
def audit_cell_punctuation(ctx: PassContext) -> PassResult:
    """Reports table cells whose text lacks a terminal period."""
    violations: List[str] = []

    for td in ctx.doc.soup.find_all("td"):
        raw = cell_text(td)
        if not raw:
            continue
        decoded = decode_entities(raw).strip()
        if is_excluded(raw, decoded):
            continue
        violations.append(decoded)

    return {"tds_without_period": violations}


# --- DEFINITION ---
DEFINITION = PassDefinition(
    name="punctuation",
    runner=audit_cell_punctuation
)
