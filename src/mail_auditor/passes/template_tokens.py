import re
from typing import List, Optional

from ..dom.core import PassContext, PassDefinition, PassResult, pass_spec
from ..model import TemplateToken

MERGE_TAG = re.compile(r'\{\{\s*(.*?)\s*\}\}', re.DOTALL)
CUSTOM_TEXT = re.compile(r'^customText\[(.*)\]$', re.IGNORECASE | re.DOTALL)
PREHEADER_SPAN = re.compile(
    r'<span[^>]*\bclass\s*=\s*["\'][^"\']*\bpreheader\b[^"\']*["\'][^>]*>',
    re.IGNORECASE,
)

# Characters of raw source inspected on each side of a token.
# Proximity, not DOM ancestry: a preheader span close to the token counts.
PREHEADER_WINDOW = 500


def split_phrases(token: str) -> Optional[List[str]]:
    """Phrases of a customText[a|b] token, or None for other tokens or empty lists."""
    match = CUSTOM_TEXT.match(token)
    if not match:
        return None
    phrases = [p.strip() for p in match.group(1).split("|")]
    phrases = [p for p in phrases if p]
    return phrases or None


def near_preheader(html: str, offset: int, window: int = PREHEADER_WINDOW) -> bool:
    context = html[max(0, offset - window):offset + window]
    return bool(PREHEADER_SPAN.search(context))


def extract_tokens(html: str) -> List[TemplateToken]:
    tokens = []
    for match in MERGE_TAG.finditer(html):
        text = match.group(1).strip()
        phrases = split_phrases(text)
        bucket = None
        if phrases:
            bucket = "preheader" if near_preheader(html, match.start()) else "general"
        tokens.append(TemplateToken(
            text=text,
            raw=match.group(0),
            offset=match.start(),
            phrases=phrases,
            bucket=bucket,
        ))
    return tokens


@pass_spec(fields=["veeva_tokens", "custom_text_blocks", "custom_text_preheaders"])
def extract_template_tokens(ctx: PassContext) -> PassResult:
    """Merge tags of the raw source and the customText phrase lists by locality."""
    tokens = extract_tokens(ctx.doc.raw_html)
    return {
        "veeva_tokens": [t.text for t in tokens],
        "custom_text_blocks": [t.phrases for t in tokens if t.bucket == "general"],
        "custom_text_preheaders": [t.phrases for t in tokens if t.bucket == "preheader"],
    }


# --- DEFINITION ---
DEFINITION = PassDefinition(
    name="template_tokens",
    runner=extract_template_tokens
)
