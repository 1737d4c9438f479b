# src/mail_auditor/services/export_service.py
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from ..model import AnalysisReport

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["Category", "Item", "Detail"]


class ExportService:
    """
    Flattens an AnalysisReport into one row per finding and writes it to CSV or Excel.
    """

    @staticmethod
    def to_rows(report: AnalysisReport) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []

        def add(category: str, item: Any, detail: Any = "") -> None:
            rows.append({"Category": category, "Item": item, "Detail": detail})

        for img in report.images_without_alt:
            add("Image without alt", img.name, img.src)
        for img in report.images:
            if img.size_kb is not None:
                add("Image size (KB)", img.name, img.size_kb)
        for link in report.broken_links:
            add("Broken link", link.href, link.text)
        for text in report.tds_without_period:
            add("Cell without period", text)
        for err in report.spelling_errors_with_context:
            add("Spelling", err.word, err.context or "")
        for match in report.repeated_words:
            add("Repeated word", match)
        for match in report.double_spaces:
            add("Double space", repr(match))
        for char in report.invisible_chars:
            add("Invisible character", f"U+{ord(char):04X}")
        for family in report.font_families:
            add("Font family", family)
        for size in report.font_sizes:
            add("Font size", size)
        for token in report.veeva_tokens:
            add("Template token", token)
        for phrases in report.custom_text_blocks:
            add("customText", " | ".join(phrases))
        for phrases in report.custom_text_preheaders:
            add("customText (preheader)", " | ".join(phrases))
        return rows

    def to_dataframe(self, report: AnalysisReport) -> pd.DataFrame:
        return pd.DataFrame(self.to_rows(report), columns=EXPORT_COLUMNS)

    def export(self, report: AnalysisReport, output: Union[str, Path]) -> Path:
        """Writes the findings; the suffix picks the format (.csv or .xlsx)."""
        output_file = Path(output)
        df = self.to_dataframe(report)

        suffix = output_file.suffix.lower()
        if suffix == ".csv":
            df.to_csv(output_file, index=False)
        elif suffix in (".xlsx", ".xls"):
            df.to_excel(output_file.with_suffix(".xlsx"), index=False, sheet_name="Findings", engine="openpyxl")
            output_file = output_file.with_suffix(".xlsx")
        else:
            raise ValueError(f"Unsupported export format '{output_file.suffix}' (use .csv or .xlsx)")

        logger.info("Exported %d findings to %s", len(df), output_file)
        return output_file
