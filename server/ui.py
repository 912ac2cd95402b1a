"""
Server-rendered UI driving the DigitizerController.

Every POST route runs one controller action and redirects back to the
page, which renders the current SessionState.
"""

from __future__ import annotations

import logging
import threading
import time

from flask import (
    Blueprint,
    Response,
    current_app,
    jsonify,
    redirect,
    render_template_string,
    request,
    url_for,
)
from werkzeug.exceptions import RequestEntityTooLarge

from controller.session import DigitizerController
from errors import MalformedTableError
from utils.html import render_table_html

logger = logging.getLogger(__name__)

ui = Blueprint("ui", __name__)

_FRAME_BOUNDARY = "frame"
_PREVIEW_INTERVAL_SECONDS = 0.1

UPLOAD_TOO_LARGE_ERROR = "Image is too large to upload."
UNEXPECTED_RESPONSE_ERROR = "Unexpected response from the extraction service: {detail}"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Coal Log Book Digitizer</title>
  <style>
    body { font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; background: #f5f5f5; }
    header { text-align: center; margin-bottom: 30px; }
    .card { background: white; padding: 20px; border-radius: 10px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); margin-bottom: 30px; text-align: center; }
    .error { background: #ffe6e6; color: #d00; padding: 15px; border-radius: 5px; margin-bottom: 20px; border: 1px solid #ffcccc; }
    .notice { background: #e6ffe6; color: #060; padding: 15px; border-radius: 5px; margin-bottom: 20px; border: 1px solid #ccffcc; }
    .actions { display: flex; gap: 15px; justify-content: center; flex-wrap: wrap; }
    .actions form { margin: 0; }
    button { color: white; border: none; padding: 12px 20px; border-radius: 5px; cursor: pointer; font-size: 16px; }
    button[disabled] { background: #6c757d; cursor: not-allowed; }
    img { width: 100%; max-width: 500px; border-radius: 10px; margin-bottom: 20px; }
    table.extracted { width: 100%; border-collapse: collapse; text-align: left; margin-bottom: 20px; }
    table.extracted tbody tr:nth-child(even) { background: #f8f9fa; }
  </style>
</head>
<body>
  <header>
    <h1>Coal Log Book Digitizer</h1>
    <p>Convert handwritten or printed coal log tables to electronic format</p>
  </header>

  {% if state.error %}<div class="error">{{ state.error }}</div>{% endif %}
  {% if state.notice %}<div class="notice">{{ state.notice }}</div>{% endif %}

  {% if not state.captured_image and not state.show_camera %}
  <div class="actions">
    <form method="post" action="{{ url_for('ui.start_camera') }}">
      <button style="background:#007bff">Take Photo</button>
    </form>
    <form method="post" action="{{ url_for('ui.upload') }}" enctype="multipart/form-data">
      <input type="file" name="file" accept="image/*" required>
      <button style="background:#28a745">Upload Image</button>
    </form>
  </div>
  {% endif %}

  {% if state.show_camera %}
  <div class="card">
    <img src="{{ url_for('ui.preview') }}" alt="Camera preview">
    <div class="actions">
      <form method="post" action="{{ url_for('ui.capture') }}">
        <button style="background:#007bff">Capture</button>
      </form>
      <form method="post" action="{{ url_for('ui.cancel_camera') }}">
        <button style="background:#dc3545">Cancel</button>
      </form>
    </div>
  </div>
  {% endif %}

  {% if state.captured_image %}
  <div class="card">
    <h3>Captured Image</h3>
    <img src="{{ state.captured_image }}" alt="Captured coal log">
    <div class="actions">
      <form method="post" action="{{ url_for('ui.extract') }}">
        <button style="background:#28a745" {% if state.is_processing %}disabled{% endif %}>
          {{ 'Processing...' if state.is_processing else 'Extract Table Data' }}
        </button>
      </form>
      <form method="post" action="{{ url_for('ui.reset') }}">
        <button style="background:#6c757d">Start Over</button>
      </form>
    </div>
  </div>
  {% endif %}

  {% if table_html %}
  <div class="card">
    <h3>Extracted Table Data</h3>
    <div style="overflow-x:auto">{{ table_html | safe }}</div>
    <div class="actions">
      <a href="{{ url_for('ui.download_csv') }}"><button style="background:#17a2b8">Download CSV</button></a>
      <a href="{{ url_for('ui.download_xlsx') }}"><button style="background:#17a2b8">Download Excel</button></a>
      <form method="post" action="{{ url_for('ui.save') }}">
        <button style="background:#ffc107; color:#333">Add to Database</button>
      </form>
    </div>
  </div>
  {% endif %}
</body>
</html>
"""


def _controller() -> DigitizerController:
    return current_app.extensions["controller"]


def _lock() -> threading.Lock:
    return current_app.extensions["controller_lock"]


def _back():
    return redirect(url_for("ui.index"))


@ui.route("/", methods=["GET"])
def index():
    with _lock():
        state = _controller().state
        table_html = (
            render_table_html(state.extracted_data)
            if state.extracted_data is not None
            else ""
        )
        return render_template_string(PAGE_TEMPLATE, state=state, table_html=table_html)


@ui.route("/camera/start", methods=["POST"])
def start_camera():
    with _lock():
        _controller().start_camera()
    return _back()


@ui.route("/camera/capture", methods=["POST"])
def capture():
    with _lock():
        _controller().capture_photo()
    return _back()


@ui.route("/camera/cancel", methods=["POST"])
def cancel_camera():
    with _lock():
        _controller().stop_camera()
    return _back()


def _mjpeg_frames(controller: DigitizerController, lock: threading.Lock, interval: float):
    """Yield multipart JPEG parts until the camera view is closed."""
    while True:
        with lock:
            if not controller.state.show_camera:
                return
            frame = controller.preview_frame()
        if frame is not None:
            yield (
                b"--" + _FRAME_BOUNDARY.encode("ascii") + b"\r\n"
                b"Content-Type: image/jpeg\r\n"
                b"Content-Length: " + str(len(frame)).encode("ascii") + b"\r\n\r\n"
                + frame + b"\r\n"
            )
        time.sleep(interval)


@ui.route("/camera/preview", methods=["GET"])
def preview():
    controller = _controller()
    lock = _lock()
    with lock:
        if not controller.state.show_camera:
            return Response(status=404)
    interval = current_app.config.get("PREVIEW_INTERVAL_SECONDS", _PREVIEW_INTERVAL_SECONDS)
    return Response(
        _mjpeg_frames(controller, lock, interval),
        content_type=f"multipart/x-mixed-replace; boundary={_FRAME_BOUNDARY}",
        headers={"Cache-Control": "no-store"},
    )


@ui.route("/upload", methods=["POST"])
def upload():
    files = request.files.getlist("file")
    if len(files) != 1:
        return _back()
    upload_file = files[0]
    data = upload_file.read()
    with _lock():
        _controller().upload_file(
            data, mime_type=upload_file.mimetype, filename=upload_file.filename
        )
    return _back()


@ui.route("/extract", methods=["POST"])
def extract():
    with _lock():
        controller = _controller()
        try:
            controller.process_image()
        except MalformedTableError as exc:
            logger.error("Malformed extraction response", exc_info=True)
            controller.state.error = UNEXPECTED_RESPONSE_ERROR.format(detail=exc)
    return _back()


@ui.route("/export.csv", methods=["GET"])
def download_csv():
    with _lock():
        result = _controller().download_csv()
    if result is None:
        return _back()
    filename, content = result
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@ui.route("/export.xlsx", methods=["GET"])
def download_xlsx():
    with _lock():
        result = _controller().download_xlsx()
    if result is None:
        return _back()
    filename, content = result
    return Response(
        content,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@ui.route("/save", methods=["POST"])
def save():
    with _lock():
        _controller().add_to_database()
    return _back()


@ui.route("/reset", methods=["POST"])
def reset():
    with _lock():
        _controller().reset()
    return _back()


@ui.app_errorhandler(RequestEntityTooLarge)
def upload_too_large(exc):
    if request.path.startswith("/api/"):
        return jsonify({"error": "request body too large"}), 413
    logger.warning("Rejected upload of %s bytes", request.content_length)
    with _lock():
        _controller().state.error = UPLOAD_TOO_LARGE_ERROR
    return _back()
