import re
from typing import List

from bs4 import Tag

from ..dom.core import PassContext, PassDefinition, PassResult, pass_spec

_FONT_FAMILY = re.compile(r'font-family:([^;]+)')
_FONT_SIZE = re.compile(r'font-size:([^;]+)')
_WHITESPACE = re.compile(r'\s+')

BOLD_TAGS = {"b", "strong"}
ITALIC_TAGS = {"i", "em"}


def normalize_style(tag: Tag) -> str:
    """Lower-cased inline style with every whitespace character removed."""
    return _WHITESPACE.sub("", (tag.get("style") or "").lower())


def is_bold(tag: Tag, style: str) -> bool:
    return tag.name in BOLD_TAGS or "font-weight:bold" in style or "font-weight:700" in style


def is_italic(tag: Tag, style: str) -> bool:
    return tag.name in ITALIC_TAGS or "font-style:italic" in style


@pass_spec(fields=["bold_texts", "italic_texts", "font_families", "font_sizes"])
def extract_typography(ctx: PassContext) -> PassResult:
    """Collects emphasised texts and the declared font families and sizes."""
    bold_texts: List[str] = []
    italic_texts: List[str] = []
    # dicts keep first-seen order while de-duplicating
    families = {}
    sizes = {}

    for tag in ctx.doc.soup.find_all(True):
        style = normalize_style(tag)

        if any(prop in style for prop in ("font-family", "font-size", "font-weight")):
            family = _FONT_FAMILY.search(style)
            size = _FONT_SIZE.search(style)
            if family:
                families[family.group(1).strip()] = None
            if size:
                sizes[size.group(1).strip()] = None

        if is_bold(tag, style) or is_italic(tag, style):
            text = tag.get_text().strip()
            if not text:
                continue
            if is_bold(tag, style):
                bold_texts.append(text)
            if is_italic(tag, style):
                italic_texts.append(text)

    return {
        "bold_texts": bold_texts,
        "italic_texts": italic_texts,
        "font_families": list(families),
        "font_sizes": list(sizes),
    }


# --- DEFINITION ---
DEFINITION = PassDefinition(
    name="typography",
    runner=extract_typography
)
