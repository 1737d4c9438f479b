# tests/auditor/test_anomalies_pass.py
from mail_auditor.passes.anomalies import detect_anomalies


def test_repeated_word_found_once(make_ctx):
    """Test of "the the cat" precies één herhaald woord oplevert."""
    result = detect_anomalies(make_ctx("<p>the the cat</p>"))
    assert result["repeated_words"] == ["the the"]


def test_repeated_words_are_case_insensitive_and_ordered(make_ctx):
    result = detect_anomalies(make_ctx("<p>It is is fine. The\nthe end, and and more</p>"))
    assert result["repeated_words"] == ["is is", "the\nthe", "and and"]


def test_double_spaces(make_ctx):
    """Test of elke reeks van twee of meer spaties één keer wordt gemeld."""
    result = detect_anomalies(make_ctx("<p>One  two   three four</p>"))
    assert result["double_spaces"] == ["  ", "   "]


def test_invisible_characters(make_ctx):
    result = detect_anomalies(make_ctx("<p>Bell\x07 and\x0b tab\tok\x7f</p>"))
    assert result["invisible_chars"] == ["\x07", "\x0b", "\x7f"]


def test_clean_text(make_ctx):
    result = detect_anomalies(make_ctx("<p>Nothing wrong here.</p>"))
    assert result == {"repeated_words": [], "double_spaces": [], "invisible_chars": []}
