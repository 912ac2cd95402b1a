import pytest

from ai.response_parser import parse_llm_json
from ai.service import VisionService
from errors import MalformedTableError
from extractors.table import MOCK_TABLE, MockTableExtractor, VisionTableExtractor, table_from_llm_text


class CannedVision(VisionService):
    def __init__(self, text):
        self.text = text
        self.calls = []

    def complete_with_image(self, prompt, image_bytes, mime_type="image/jpeg"):
        self.calls.append((prompt, image_bytes, mime_type))
        return self.text


def test_parse_llm_json_strips_fences():
    raw = '```json\n{"headers": ["A"], "rows": [["1"]]}\n```'
    assert parse_llm_json(raw) == {"headers": ["A"], "rows": [["1"]]}


def test_parse_llm_json_prefers_object_over_inner_array():
    raw = 'Here you go: {"headers": ["A", "B"], "rows": []} Hope this helps.'
    assert parse_llm_json(raw) == {"headers": ["A", "B"], "rows": []}


def test_parse_llm_json_returns_none_for_prose():
    assert parse_llm_json("I could not read the image.") is None


def test_wrapped_table_is_accepted():
    table = table_from_llm_text('{"tableData": {"headers": ["Shift"], "rows": [["Night"]]}}')
    assert table.rows == [["Night"]]


@pytest.mark.parametrize("raw", ["no json here", '["A", "B"]', '{"columns": []}'])
def test_unusable_output_raises(raw):
    with pytest.raises(MalformedTableError):
        table_from_llm_text(raw)


def test_vision_extractor_passes_image_and_prompt():
    service = CannedVision('{"headers": ["Coal Type"], "rows": [["Anthracite"]]}')
    table = VisionTableExtractor(service).extract(b"img", "prompt", mime_type="image/png")
    assert service.calls == [("prompt", b"img", "image/png")]
    assert table.headers == ["Coal Type"]


def test_mock_extractor_returns_independent_copy():
    table = MockTableExtractor().extract(b"", "")
    table.rows.append(["x"])
    assert len(MOCK_TABLE.rows) == 3
    assert MOCK_TABLE.headers[3] == "Quantity (tons)"
