import asyncio
import re
from typing import List, Optional

from ..dom.core import PassContext, PassDefinition, PassResult, pass_spec
from ..model import SpellingError
from ..services.spellcheck_service import SpellChecker, load_spell_checker

_WORD = re.compile(r'\b[a-záéíóúüñ]{2,}(?:-[a-záéíóúüñ]{2,})*\b', re.IGNORECASE)

CONTEXT_WORDS = 3


def tokenize(text: str) -> List[str]:
    """
    Unique lower-cased words in first-seen order. Hyphenated words are kept
    and followed by their parts.
    """
    tokens = {}
    for match in _WORD.finditer(text.lower()):
        word = match.group(0)
        tokens[word] = None
        if "-" in word:
            for part in word.split("-"):
                tokens[part] = None
    return list(tokens)


def word_context(text: str, word: str, size: int = CONTEXT_WORDS) -> Optional[str]:
    """Up to `size` whole words around the first occurrence of `word`."""
    pattern = re.compile(
        rf'(?:\b(?:\w+\b\W*){{0,{size}}})\b{re.escape(word)}\b(?:\W*\b\w+){{0,{size}}}',
        re.IGNORECASE,
    )
    match = pattern.search(text)
    return match.group(0).strip() if match else None


def find_misspelled(tokens: List[str], checker: SpellChecker) -> List[str]:
    return [token for token in tokens if not checker.check(token)]


@pass_spec(fields=["spelling_errors", "spelling_errors_with_context"])
async def check_spelling(ctx: PassContext) -> PassResult:
    """
    Checks every body word against the configured spell checker.
    A dictionary that cannot be loaded aborts the analysis (DictionaryLoadError).
    """
    checker = await load_spell_checker(ctx.options)

    text = ctx.doc.body_text
    tokens = tokenize(text)
    errors = await asyncio.to_thread(find_misspelled, tokens, checker)

    with_context = [SpellingError(word=word, context=word_context(text, word)) for word in errors]

    ctx.logger.debug(
        "Spell check (%s): %d unique words, %d rejected", getattr(checker, "name", "custom"), len(tokens), len(errors)
    )
    return {"spelling_errors": errors, "spelling_errors_with_context": with_context}


# --- DEFINITION ---
DEFINITION = PassDefinition(
    name="spelling",
    runner=check_spelling
)
