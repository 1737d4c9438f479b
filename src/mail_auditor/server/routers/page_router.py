import logging
from flask import Blueprint, render_template, request

from mail_auditor.errors import FatalAnalysisError
from mail_auditor.server.routers.analysis_router import get_audit_controller

logger = logging.getLogger(__name__)

# Blueprint for handling HTML page rendering
page_router = Blueprint('page_router', __name__)

# (field, title) in display order
REPORT_SECTIONS = [
    ("imagesWithoutAlt", "Images without alt text"),
    ("images", "Images"),
    ("brokenLinks", "Broken links"),
    ("links", "Links"),
    ("tdsWithoutPeriod", "Table cells without final period"),
    ("spellingErrorsWithContext", "Spelling errors"),
    ("repeatedWords", "Repeated words"),
    ("doubleSpaces", "Double spaces"),
    ("invisibleChars", "Invisible characters"),
    ("boldTexts", "Bold texts"),
    ("italicTexts", "Italic texts"),
    ("fontFamilies", "Font families"),
    ("fontSizes", "Font sizes"),
    ("veevaTokens", "Template tokens"),
    ("customTextBlocks", "customText blocks"),
    ("customTextPreheaders", "customText in preheader"),
]


@page_router.route('/')
def index():
    """Renders the upload form."""
    return render_template('index.html')


@page_router.route('/report', methods=['POST'])
def report_view():
    """
    Runs the analysis on the submitted file or pasted HTML and renders
    each report field as a collapsible section.
    """
    controller = get_audit_controller()
    uploaded = request.files.get('htmlFile')

    try:
        if uploaded is not None and uploaded.filename:
            payload = controller.analyze_text(uploaded.read())
            source = uploaded.filename
        else:
            payload = controller.analyze_text(request.form.get('htmlContent', ''))
            source = "pasted HTML"
    except FatalAnalysisError as e:
        logger.warning("Report page analysis failed: %s", e)
        return render_template('index.html', error=str(e)), 400

    return render_template(
        'report.html',
        source=source,
        analysis=payload["analysis"],
        sections=REPORT_SECTIONS,
    )
