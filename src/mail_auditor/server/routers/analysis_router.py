import logging
from flask import Blueprint, jsonify, request, current_app

from mail_auditor.errors import InputError, ParseError, DictionaryLoadError

logger = logging.getLogger(__name__)

analysis_router = Blueprint('analysis_router', __name__)


# --- HELPER FUNCTIONS ---

def get_audit_controller():
    """Retrieves the audit controller from the Flask application context."""
    controller = current_app.config.get('AUDIT_CONTROLLER')
    if not controller:
        raise RuntimeError("AuditController is not set in app.config['AUDIT_CONTROLLER']")
    return controller


def get_upload_manager():
    manager = current_app.config.get('UPLOAD_MANAGER')
    if not manager:
        raise RuntimeError("UploadManager is not set in app.config['UPLOAD_MANAGER']")
    return manager


def error_response(error: str, details: str, status: int):
    return jsonify({"error": error, "details": details}), status


def run_analysis():
    """
    Dispatches to the controller based on the request shape:
    multipart 'htmlFile', JSON/form 'filename' or JSON/form 'htmlContent'.
    """
    controller = get_audit_controller()

    uploaded = request.files.get('htmlFile')
    if uploaded is not None:
        return controller.analyze_text(uploaded.read())

    data = request.get_json(silent=True)
    if data is None:
        data = request.form
    elif not isinstance(data, dict):
        raise InputError("Request body must be a JSON object")

    filename = data.get('filename')
    if filename:
        return controller.analyze_stored(filename)

    html_content = data.get('htmlContent')
    if html_content:
        return controller.analyze_text(html_content)

    raise InputError("Provide a stored 'filename', 'htmlContent' or an 'htmlFile' upload")


# --- API ROUTES ---

@analysis_router.route('/upload', methods=['POST'])
def upload_file():
    """Stores an uploaded email and returns the filename to analyse it by."""
    uploaded = request.files.get('file')
    if uploaded is None:
        return error_response("No file uploaded", "Expected a multipart field named 'file'", 400)

    try:
        filename = get_upload_manager().save(uploaded.stream, uploaded.filename)
    except InputError as e:
        return error_response("Invalid upload", str(e), 400)

    return jsonify({"message": "File uploaded", "filename": filename})


@analysis_router.route('/analyze', methods=['POST'])
def analyze():
    """Runs the audit and returns the report as JSON."""
    try:
        return jsonify(run_analysis())
    except (InputError, ParseError) as e:
        logger.warning("Rejected analysis request: %s", e)
        return error_response("Invalid input", str(e), 400)
    except DictionaryLoadError as e:
        logger.error("Spelling dictionary unavailable: %s", e)
        return error_response("Spelling dictionary could not be loaded", str(e), 500)
