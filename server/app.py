"""
Flask application factory.

Wires the backend API and the UI together.  The UI's extraction client
talks to the API over HTTP (``settings.api_base_url``), so the API can
also be deployed on its own.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from flask import Flask

from ai.factory import get_vision_service
from capture.camera import CameraAdapter, OpenCVCamera
from capture.stream import CameraStream
from client.extraction_client import ExtractionClient
from config import Settings
from controller.session import DigitizerController
from extractors.table import MockTableExtractor, VisionTableExtractor
from server.api import TableExtractor, api
from server.ui import ui
from storage.table_store import JsonlTableStore

logger = logging.getLogger(__name__)

_MAX_UPLOAD_BYTES = 25 * 1024 * 1024


def build_extractor(settings: Settings) -> TableExtractor:
    if settings.mock_api:
        return MockTableExtractor()
    return VisionTableExtractor(get_vision_service(settings))


def create_app(
    settings: Optional[Settings] = None,
    *,
    extractor: Optional[TableExtractor] = None,
    store: Optional[JsonlTableStore] = None,
    controller: Optional[DigitizerController] = None,
    camera: Optional[CameraAdapter] = None,
) -> Flask:
    settings = settings or Settings()

    app = Flask(__name__)
    app.config["MOCK_API"] = settings.mock_api
    app.config["MAX_CONTENT_LENGTH"] = _MAX_UPLOAD_BYTES

    app.extensions["table_extractor"] = extractor or build_extractor(settings)
    app.extensions["table_store"] = store or JsonlTableStore(settings.save_path)

    if controller is None:
        adapter = camera or OpenCVCamera(settings.camera_index, settings.jpeg_quality)
        controller = DigitizerController(
            CameraStream(adapter),
            ExtractionClient(settings.api_base_url, timeout=settings.request_timeout),
        )
    app.extensions["controller"] = controller
    app.extensions["controller_lock"] = threading.Lock()

    app.register_blueprint(api)
    app.register_blueprint(ui)

    logger.info(
        "App ready (mock=%s, provider=%s, api=%s)",
        settings.mock_api,
        settings.ai_provider,
        settings.api_base_url,
    )
    return app
