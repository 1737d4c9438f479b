"""
mailcheck - Analysis Server
Flask application exposing the HTML email audit over HTTP.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from flask import Flask

from mail_auditor.controllers.audit_controller import AuditController
from mail_auditor.managers.upload_manager import UploadManager
from mail_auditor.model import AnalysisOptions
from mail_auditor.server.routers.analysis_router import analysis_router
from mail_auditor.server.routers.page_router import page_router
from mailcheck.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def create_app(
        options: Optional[AnalysisOptions] = None,
        upload_dir: Optional[Union[str, Path]] = None,
        max_content_length_mb: int = 10
) -> Flask:
    """
    Application factory wiring the upload storage and the audit controller.
    """
    flask_app = Flask(__name__)
    flask_app.config['MAX_CONTENT_LENGTH'] = max_content_length_mb * 1024 * 1024

    # 1. Initialize Storage
    if upload_dir is None:
        upload_dir = PathUtils.get_upload_dir()
    upload_manager = UploadManager(upload_dir)

    # 2. Initialize Controller
    audit_controller = AuditController(options or AnalysisOptions(), upload_manager)

    # 3. Inject into App Config for Blueprint access
    flask_app.config['UPLOAD_MANAGER'] = upload_manager
    flask_app.config['AUDIT_CONTROLLER'] = audit_controller

    # 4. Register Blueprints
    flask_app.register_blueprint(analysis_router, url_prefix='/api')
    flask_app.register_blueprint(page_router)

    logger.info("Analysis server created (uploads in %s)", upload_manager.upload_dir)
    return flask_app
