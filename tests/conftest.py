from __future__ import annotations

from typing import Any, Optional

import pytest
import requests

from capture.stream import CameraStream
from client.extraction_client import ExtractionClient
from controller.session import DigitizerController
from dto.table_data import TableData
from tests.fakes import FakeCamera, FakeSession


@pytest.fixture
def sample_table() -> TableData:
    return TableData(headers=["A", "B"], rows=[["1", "2"], ["3", "4"]])


@pytest.fixture
def fake_camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def make_controller(fake_camera):
    def _make(*responses: Any, camera: Optional[FakeCamera] = None):
        session = FakeSession(*responses)
        client = ExtractionClient("http://backend", session=session)
        controller = DigitizerController(CameraStream(camera or fake_camera), client)
        return controller, session

    return _make


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
