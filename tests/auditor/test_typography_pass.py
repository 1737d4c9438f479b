# tests/auditor/test_typography_pass.py
from mail_auditor.passes.typography import extract_typography


def test_bold_and_italic_texts(make_ctx):
    """Test of vet en cursief via tags en inline styles worden herkend."""
    html = """
        <p><b>Bold tag</b> <strong>Strong tag</strong></p>
        <span style="font-weight: bold">Styled bold</span>
        <span style="FONT-WEIGHT:700">Numeric bold</span>
        <i>Italic tag</i> <em>Em tag</em>
        <span style="font-style : italic">Styled italic</span>
        <b>   </b>
    """
    result = extract_typography(make_ctx(html))

    assert result["bold_texts"] == ["Bold tag", "Strong tag", "Styled bold", "Numeric bold"]
    assert result["italic_texts"] == ["Italic tag", "Em tag", "Styled italic"]


def test_bold_italic_element_is_in_both_lists(make_ctx):
    result = extract_typography(make_ctx('<b style="font-style:italic">Both</b>'))
    assert result["bold_texts"] == ["Both"]
    assert result["italic_texts"] == ["Both"]


def test_font_families_and_sizes_are_deduplicated(make_ctx):
    """Test of font-family en font-size waarden uniek worden verzameld."""
    html = """
        <td style="font-family: Arial, sans-serif; font-size: 14px;">a</td>
        <td style="Font-Family:Arial,sans-serif;font-size:14px">b</td>
        <td style="font-size: 12px">c</td>
        <td style="color: red">d</td>
    """
    result = extract_typography(make_ctx(html))

    assert set(result["font_families"]) == {"arial,sans-serif"}
    assert set(result["font_sizes"]) == {"14px", "12px"}


def test_empty_document(make_ctx):
    result = extract_typography(make_ctx(""))
    assert result == {"bold_texts": [], "italic_texts": [], "font_families": [], "font_sizes": []}
