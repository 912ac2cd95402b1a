import base64

import pytest

from config import Settings
from dto.table_data import TableData
from errors import MalformedTableError
from extractors.table import MOCK_TABLE
from server.app import create_app
from storage.table_store import JsonlTableStore
from tests.fakes import FakeCamera

IMAGE_B64 = base64.b64encode(b"\xff\xd8\xff\xe0").decode()


class StubExtractor:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def extract(self, image_bytes, prompt, mime_type="image/jpeg"):
        self.calls.append((image_bytes, prompt, mime_type))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def store(tmp_path):
    return JsonlTableStore(str(tmp_path / "tables.jsonl"))


def _client(extractor=None, store=None, mock=False):
    app = create_app(
        Settings(mock_api=mock),
        extractor=extractor or StubExtractor(MOCK_TABLE),
        store=store,
        camera=FakeCamera(),
    )
    app.config["TESTING"] = True
    return app.test_client()


def test_health():
    response = _client().get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "mock": False}


def test_health_reports_mock_mode():
    response = _client(mock=True).get("/api/health")
    assert response.get_json() == {"status": "ok", "mock": True}


def test_process_table_returns_table_data(sample_table):
    extractor = StubExtractor(sample_table)
    response = _client(extractor).post(
        "/api/process-table", json={"image": IMAGE_B64, "prompt": "extract"}
    )
    assert response.status_code == 200
    assert response.get_json() == {
        "tableData": {"headers": ["A", "B"], "rows": [["1", "2"], ["3", "4"]]}
    }
    assert extractor.calls == [(b"\xff\xd8\xff\xe0", "extract", "image/jpeg")]
    assert response.headers["Access-Control-Allow-Origin"] == "*"


@pytest.mark.parametrize(
    "body",
    [
        {"prompt": "extract"},
        {"image": "***not base64***", "prompt": "extract"},
        {"image": "", "prompt": "extract"},
    ],
)
def test_process_table_rejects_bad_requests(body):
    assert _client().post("/api/process-table", json=body).status_code == 400


def test_process_table_maps_extraction_failures_to_502():
    client = _client(StubExtractor(MalformedTableError("no table")))
    response = client.post("/api/process-table", json={"image": IMAGE_B64, "prompt": "p"})
    assert response.status_code == 502
    assert "no table" in response.get_json()["error"]

    client = _client(StubExtractor(RuntimeError("quota exceeded")))
    response = client.post("/api/process-table", json={"image": IMAGE_B64, "prompt": "p"})
    assert response.status_code == 502


def test_save_appends_to_store(store, sample_table):
    client = _client(store=store)
    response = client.post("/api/save-to-database", json=sample_table.model_dump())
    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True

    saved = store.load_all()
    assert [r.id for r in saved] == [body["id"]]
    assert saved[0].table == sample_table


def test_save_rejects_non_table(store):
    client = _client(store=store)
    assert client.post("/api/save-to-database", json=["A", "B"]).status_code == 400
    assert client.post("/api/save-to-database", json={"headers": 3}).status_code == 400
    assert store.load_all() == []


def test_mock_mode_answers_without_writing(store):
    app = create_app(Settings(mock_api=True), store=store, camera=FakeCamera())
    client = app.test_client()

    response = client.post("/api/process-table", json={"image": IMAGE_B64, "prompt": "p"})
    assert TableData.model_validate(response.get_json()["tableData"]) == MOCK_TABLE

    response = client.post("/api/save-to-database", json=MOCK_TABLE.model_dump())
    assert response.get_json() == {"success": True}
    assert store.load_all() == []


def test_oversized_request_gets_json_413():
    client = _client()
    client.application.config["MAX_CONTENT_LENGTH"] = 64
    response = client.post(
        "/api/process-table", json={"image": "A" * 256, "prompt": "extract"}
    )
    assert response.status_code == 413
    assert response.get_json() == {"error": "request body too large"}
