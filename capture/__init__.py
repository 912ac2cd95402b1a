"""
Image acquisition: live camera capture and file upload.

Both paths produce a ``data:<mime>;base64,...`` URL.
"""

from capture.camera import CameraAdapter, OpenCVCamera
from capture.stream import CameraStream
from capture.upload import decode_upload, load_image_file

__all__ = [
    "CameraAdapter",
    "OpenCVCamera",
    "CameraStream",
    "decode_upload",
    "load_image_file",
]
