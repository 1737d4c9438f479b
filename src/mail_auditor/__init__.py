"""
HTML email audit engine.

    report = analyze_html_sync(html, AnalysisOptions(spelling_strategy="heuristic"))
"""
import logging

from mail_auditor.model import AnalysisOptions, AnalysisReport
from mail_auditor.dom.qngine import analyze_html, analyze_html_sync

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["AnalysisOptions", "AnalysisReport", "analyze_html", "analyze_html_sync"]
