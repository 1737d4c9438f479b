# src/mail_auditor/services/spellcheck_service.py
import abc
import asyncio
import logging
import re
from typing import Optional

from spylls.hunspell import Dictionary

from ..errors import DictionaryLoadError
from ..model import AnalysisOptions

logger = logging.getLogger(__name__)


class SpellChecker(abc.ABC):
    """Capability shared by every spelling strategy."""

    name: str = "base"

    @abc.abstractmethod
    def check(self, word: str) -> bool:
        """Returns True when the (lower-cased) word is considered correct."""


class DictionarySpellChecker(SpellChecker):
    """Hunspell affix dictionary (.aff + .dic) backed checker."""

    name = "dictionary"

    def __init__(self, dictionary: Dictionary):
        self.dictionary = dictionary

    def check(self, word: str) -> bool:
        return self.dictionary.lookup(word)

    @classmethod
    def load(cls, path: Optional[str] = None, language: str = "en_US") -> "DictionarySpellChecker":
        """
        Loads a dictionary from a path stem ('dicts/en_US' for 'dicts/en_US.aff' and
        'dicts/en_US.dic') or, without a path, the system dictionary for `language`.

        Raises:
            DictionaryLoadError: If the dictionary cannot be found or read.
        """
        source = path or language
        try:
            if path:
                dictionary = Dictionary.from_files(path)
            else:
                dictionary = Dictionary.from_system(language)
        except Exception as e:
            raise DictionaryLoadError(f"Could not load dictionary '{source}': {e}") from e

        logger.info("Loaded spelling dictionary '%s'", source)
        return cls(dictionary)


# Allow list of the heuristic checker
COMMON_WORDS = frozenset({
    'the', 'be', 'to', 'of', 'and', 'a', 'in', 'that', 'have', 'i', 'it', 'for', 'not', 'on', 'with', 'as', 'you',
    'do', 'at', 'this', 'but', 'his', 'by', 'from', 'they', 'we', 'say', 'her', 'she', 'or', 'an', 'will', 'my',
    'one', 'all', 'would', 'there', 'their', 'what', 'so', 'up', 'out', 'if', 'about', 'who', 'get', 'which', 'go',
    'me', 'when', 'make', 'can', 'like', 'time', 'no', 'just', 'him', 'know', 'take', 'people', 'into', 'year',
    'your', 'good', 'some', 'could', 'them', 'see', 'other', 'than', 'then', 'now', 'look', 'only', 'come', 'its',
    'over', 'think', 'also', 'back', 'after', 'use', 'two', 'how', 'our', 'work', 'first', 'well', 'way', 'even',
    'new', 'want', 'because', 'any', 'these', 'give', 'day', 'most', 'us', 'is', 'was', 'are', 'been', 'has',
    'had', 'were', 'said', 'each', 'many', 'more', 'very', 'life', 'still', 'should', 'being', 'made', 'before',
    'here', 'through', 'where', 'much', 'oil', 'sit',
})

SUSPICIOUS_PATTERNS = (
    re.compile(r'(.)\1{2,}'),  # triple letters
    re.compile(r'[aeiou]{4,}'),
    re.compile(r'[bcdfghjklmnpqrstvwxyz]{5,}'),
    re.compile(r'^.{15,}$'),
)


class HeuristicSpellChecker(SpellChecker):
    """
    Degraded fallback used when no dictionary is available.
    Flags words with implausible letter patterns; everything else passes.
    """

    name = "heuristic"

    def check(self, word: str) -> bool:
        word = word.lower()
        if word in COMMON_WORDS or len(word) < 3:
            return True
        return not any(pattern.search(word) for pattern in SUSPICIOUS_PATTERNS)


async def load_spell_checker(options: AnalysisOptions) -> SpellChecker:
    """
    Returns the injected checker or builds the configured one.
    The dictionary is parsed in a worker thread; cancelling the caller abandons the wait.
    """
    if options.spell_checker is not None:
        return options.spell_checker

    if options.spelling_strategy == "heuristic":
        return HeuristicSpellChecker()

    return await asyncio.to_thread(
        DictionarySpellChecker.load, options.dictionary_path, options.dictionary_language
    )
