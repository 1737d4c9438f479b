# tests/auditor/test_dom_builder.py
import pytest

from mail_auditor.dom.builder import DOMBuilder
from mail_auditor.errors import InputError, ParseError


@pytest.fixture
def builder():
    return DOMBuilder()


def test_parse_full_document(builder):
    """Test of een volledig document correct wordt ingelezen."""
    doc = builder.parse_doc("<!DOCTYPE html><html><head><title>Hi</title></head><body><p>Hello world</p></body></html>")
    assert doc.has_doctype
    assert doc.root_tag_valid
    assert doc.body_text == "Hello world"


def test_parse_bytes_and_bom(builder):
    """Test of bytes als UTF-8 worden gedecodeerd en de BOM verdwijnt."""
    doc = builder.parse_doc("\ufeff<p>Café</p>".encode("utf-8"))
    assert doc.raw_html.startswith("<p>")
    assert "Café" in doc.body_text


def test_malformed_markup_is_tolerated(builder):
    """Test of kapotte HTML niet tot een fout leidt."""
    doc = builder.parse_doc("<table><tr><td>One<td>Two</tr></table></div></span><p>Tail")
    assert len(doc.soup.find_all("td")) == 2
    assert "Tail" in doc.body_text


def test_fragment_text_skips_head_script_and_style(builder):
    """Test of tekst zonder <body> wordt verzameld zonder head, script en style."""
    doc = builder.parse_doc("<head><title>Hidden</title></head><style>p{}</style><p>Shown</p><script>var x;</script>")
    assert doc.body_text.strip() == "Shown"


def test_non_text_input_is_rejected(builder):
    """Test of None en andere types een InputError geven."""
    with pytest.raises(InputError):
        builder.parse_doc(None)
    with pytest.raises(InputError):
        builder.parse_doc(42)


def test_undecodable_bytes_raise_parse_error(builder):
    """Test of ongeldige UTF-8 een ParseError geeft."""
    with pytest.raises(ParseError):
        builder.parse_doc(b"\xff\xfe<p>broken</p>\xc3")


def test_load_file_sets_base_path(builder, tmp_path):
    """Test of load_file de map van het bestand als base path gebruikt."""
    html_file = tmp_path / "mail.html"
    html_file.write_text("<p>Hi</p>", encoding="utf-8")
    doc = builder.load_file(html_file)
    assert doc.base_path == tmp_path.resolve()


def test_load_missing_file(builder, tmp_path):
    """Test of een ontbrekend bestand een InputError geeft."""
    with pytest.raises(InputError):
        builder.load_file(tmp_path / "missing.html")
