import asyncio
import logging
from typing import Any, Dict, Optional, Union

from mail_auditor.dom.qngine import analyze_html
from mail_auditor.errors import InputError
from mail_auditor.managers.upload_manager import UploadManager
from mail_auditor.model import AnalysisOptions, AnalysisReport

logger = logging.getLogger(__name__)


class AuditController:
    """
    Orchestrates one analysis request: picks the document source (stored
    upload or raw HTML), runs the engine and wraps the report in the
    response payload shared by the API and the CLI.
    """

    def __init__(self, options: AnalysisOptions, upload_manager: Optional[UploadManager] = None):
        self.options = options
        self.upload_manager = upload_manager

    def analyze_stored(self, filename: str) -> Dict[str, Any]:
        """Analyses a previously uploaded file. Local images resolve next to it."""
        if self.upload_manager is None:
            raise InputError("No upload storage configured")

        html = self.upload_manager.read(filename)
        options = self.options.model_copy(update={"base_path": self.upload_manager.upload_dir})
        report = self._run(html, options)
        logger.info("Analysed stored file %s", filename)
        return self.build_payload(report, f"File {filename} analysed")

    def analyze_text(self, html: Union[str, bytes]) -> Dict[str, Any]:
        """Analyses raw HTML received with the request."""
        if not html:
            raise InputError("No HTML content provided")
        report = self._run(html, self.options)
        return self.build_payload(report, "HTML analysis completed")

    @staticmethod
    def _run(html: Union[str, bytes], options: AnalysisOptions) -> AnalysisReport:
        return asyncio.run(analyze_html(html, options))

    @staticmethod
    def build_payload(report: AnalysisReport, message: str) -> Dict[str, Any]:
        return {
            "success": True,
            "message": message,
            "analysis": report.to_payload(),
        }
