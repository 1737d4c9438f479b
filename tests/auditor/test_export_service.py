# tests/auditor/test_export_service.py
import pandas as pd
import pytest

from mail_auditor import analyze_html_sync
from mail_auditor.services.export_service import EXPORT_COLUMNS, ExportService


@pytest.fixture
def report(offline_options):
    html = '<img src="a.png"><table><tr><td>No period</td></tr></table><p>so so</p>{{customText[A|B]}}'
    return analyze_html_sync(html, offline_options)


def test_rows_per_finding(report):
    rows = ExportService.to_rows(report)
    categories = [row["Category"] for row in rows]

    assert "Image without alt" in categories
    assert {"Category": "Cell without period", "Item": "No period", "Detail": ""} in rows
    assert {"Category": "Repeated word", "Item": "so so", "Detail": ""} in rows
    assert {"Category": "customText", "Item": "A | B", "Detail": ""} in rows


def test_export_csv(report, tmp_path):
    """Test of de bevindingen als CSV worden weggeschreven."""
    written = ExportService().export(report, tmp_path / "findings.csv")

    df = pd.read_csv(written)
    assert list(df.columns) == EXPORT_COLUMNS
    assert "Image without alt" in set(df["Category"])


def test_unsupported_format(report, tmp_path):
    with pytest.raises(ValueError):
        ExportService().export(report, tmp_path / "findings.json")
