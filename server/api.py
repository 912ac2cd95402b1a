"""
Backend HTTP API.

Exposes:
- GET  /api/health             → health check
- POST /api/process-table      → {image, prompt} → {tableData: {headers, rows}}
- POST /api/save-to-database   → TableData → {success, id}

In mock mode both POST routes answer with canned data and nothing is
sent to a vision service or written to the store.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Optional, Protocol

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from dto.api import ProcessTableRequest, ProcessTableResponse, SaveResult
from dto.table_data import TableData
from errors import MalformedTableError
from storage.table_store import JsonlTableStore

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")


class TableExtractor(Protocol):
    def extract(
        self, image_bytes: bytes, prompt: str, mime_type: str = "image/jpeg"
    ) -> TableData:
        ...


def _extractor() -> TableExtractor:
    return current_app.extensions["table_extractor"]


def _store() -> Optional[JsonlTableStore]:
    return current_app.extensions.get("table_store")


def _mock_mode() -> bool:
    return bool(current_app.config.get("MOCK_API", False))


@api.after_request
def add_cors_headers(response):
    """Simple CORS headers for dev usage."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return response


@api.route("/health", methods=["GET"])
def healthcheck():
    return jsonify({"status": "ok", "mock": _mock_mode()}), 200


@api.route("/process-table", methods=["POST"])
def process_table():
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({"error": "JSON body required"}), 400
    try:
        body = ProcessTableRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"error": "invalid request", "details": json.loads(exc.json(include_url=False))}), 400

    try:
        image_bytes = base64.b64decode(body.image, validate=True)
    except (binascii.Error, ValueError):
        return jsonify({"error": "image is not valid base64"}), 400
    if not image_bytes:
        return jsonify({"error": "image is empty"}), 400

    try:
        table = _extractor().extract(image_bytes, body.prompt, mime_type=body.mime_type)
    except MalformedTableError as exc:
        logger.warning("Extraction returned an unusable table: %s", exc)
        return jsonify({"error": str(exc)}), 502
    except Exception as exc:
        logger.exception("Extraction failed")
        return jsonify({"error": f"extraction failed: {exc}"}), 502

    response = ProcessTableResponse(table_data=table)
    return jsonify(response.model_dump(by_alias=True)), 200


@api.route("/save-to-database", methods=["POST"])
def save_to_database():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "JSON object body required"}), 400
    try:
        table = TableData.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"error": "invalid table", "details": json.loads(exc.json(include_url=False))}), 400

    if _mock_mode():
        return jsonify(SaveResult().model_dump(exclude_none=True)), 200

    store = _store()
    if store is None:
        return jsonify({"error": "no table store configured"}), 503
    try:
        record = store.save(table)
    except OSError as exc:
        logger.exception("Writing to %s failed", store.path)
        return jsonify({"error": f"save failed: {exc}"}), 500
    return jsonify(SaveResult(id=record.id).model_dump()), 200
