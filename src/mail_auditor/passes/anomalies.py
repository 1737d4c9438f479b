import re

from ..dom.core import PassContext, PassDefinition, PassResult, pass_spec

REPEATED_WORD = re.compile(r'\b(\w+)(\s+)?\1\b')
DOUBLE_SPACE = re.compile(r' {2,}')
INVISIBLE_CHAR = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')


@pass_spec(fields=["repeated_words", "double_spaces", "invisible_chars"])
def detect_anomalies(ctx: PassContext) -> PassResult:
    """Repeated words, runs of spaces and control characters in the body text."""
    text = ctx.doc.body_text
    return {
        "repeated_words": [m.group(0) for m in REPEATED_WORD.finditer(text.lower())],
        "double_spaces": DOUBLE_SPACE.findall(text),
        "invisible_chars": INVISIBLE_CHAR.findall(text),
    }


# --- DEFINITION ---
DEFINITION = PassDefinition(
    name="anomalies",
    runner=detect_anomalies
)
