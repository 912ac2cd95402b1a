import pytest

from controller.session import (
    CAMERA_ERROR,
    EXTRACTION_ERROR,
    SAVE_ERROR,
    SAVE_SUCCESS,
)
from dto.table_data import TableData
from errors import MalformedTableError
from tests.fakes import FakeCamera, FakeResponse

IMAGE = "data:image/jpeg;base64,/9j/4AAQ"
TABLE_BODY = {"tableData": {"headers": ["Date", "Shift"], "rows": [["2024-01-15", "Day"]]}}


def test_http_500_leaves_table_unset_and_sets_error(make_controller):
    controller, _ = make_controller(FakeResponse(500, {"error": "boom"}))
    controller.state.captured_image = IMAGE

    controller.process_image()

    assert controller.state.extracted_data is None
    assert controller.state.error == EXTRACTION_ERROR
    assert not controller.state.is_processing


def test_failure_keeps_previous_table(make_controller, connection_error):
    controller, _ = make_controller(FakeResponse(200, TABLE_BODY), connection_error)
    controller.state.captured_image = IMAGE

    controller.process_image()
    first = controller.state.extracted_data
    controller.process_image()

    assert controller.state.extracted_data == first
    assert controller.state.error == EXTRACTION_ERROR


def test_success_sets_table_and_clears_error(make_controller):
    controller, _ = make_controller(FakeResponse(200, TABLE_BODY))
    controller.state.captured_image = IMAGE
    controller.state.error = "old error"

    controller.process_image()

    assert controller.state.extracted_data == TableData(
        headers=["Date", "Shift"], rows=[["2024-01-15", "Day"]]
    )
    assert controller.state.error is None


def test_malformed_response_propagates(make_controller):
    controller, _ = make_controller(FakeResponse(200, {"unexpected": True}))
    controller.state.captured_image = IMAGE

    with pytest.raises(MalformedTableError):
        controller.process_image()
    assert not controller.state.is_processing
    assert controller.state.extracted_data is None


def test_no_request_without_image_or_while_processing(make_controller):
    controller, session = make_controller()
    controller.process_image()
    controller.state.captured_image = IMAGE
    controller.state.is_processing = True
    controller.process_image()
    assert session.calls == []


def test_capture_releases_camera_once(make_controller, fake_camera):
    controller, _ = make_controller()
    controller.start_camera()
    assert controller.state.show_camera

    controller.capture_photo()

    assert controller.state.captured_image.startswith("data:image/jpeg;base64,")
    assert not controller.state.show_camera
    assert fake_camera.opens == fake_camera.releases == 1


def test_cancel_releases_camera_once(make_controller, fake_camera):
    controller, _ = make_controller()
    controller.start_camera()
    controller.stop_camera()
    controller.reset()
    assert fake_camera.opens == fake_camera.releases == 1
    assert controller.state.captured_image is None


def test_reset_releases_camera_and_clears_state(make_controller, fake_camera, sample_table):
    controller, _ = make_controller()
    controller.start_camera()
    controller.state.captured_image = IMAGE
    controller.state.extracted_data = sample_table
    controller.state.error = "something"

    controller.reset()

    assert controller.state.captured_image is None
    assert controller.state.extracted_data is None
    assert controller.state.error is None
    assert not controller.state.show_camera
    assert fake_camera.releases == 1


def test_reset_without_camera_is_safe(make_controller, fake_camera):
    controller, _ = make_controller()
    controller.reset()
    assert fake_camera.releases == 0


def test_denied_camera_sets_error_and_stays_in_start_state(make_controller):
    camera = FakeCamera(deny=True)
    controller, _ = make_controller(camera=camera)

    controller.start_camera()

    assert controller.state.error == CAMERA_ERROR
    assert not controller.state.show_camera
    assert controller.state.captured_image is None


def test_failed_snapshot_sets_error_and_releases(make_controller):
    camera = FakeCamera(frame=None)
    controller, _ = make_controller(camera=camera)
    controller.start_camera()
    controller.capture_photo()

    assert controller.state.error == CAMERA_ERROR
    assert controller.state.captured_image is None
    assert camera.releases == 1


def test_upload_rejects_non_images_silently(make_controller):
    controller, _ = make_controller()
    controller.upload_file(b"plain text", mime_type="text/plain")
    assert controller.state.captured_image is None
    assert controller.state.error is None

    controller.upload_file(b"\x89PNG", mime_type="image/png")
    assert controller.state.captured_image == "data:image/png;base64,iVBORw=="


def test_save_success_and_failure(make_controller, sample_table):
    controller, session = make_controller(FakeResponse(200, {"success": True}), FakeResponse(500))
    controller.state.extracted_data = sample_table

    controller.add_to_database()
    assert controller.state.notice == SAVE_SUCCESS
    assert controller.state.error is None

    controller.add_to_database()
    assert controller.state.notice is None
    assert controller.state.error == SAVE_ERROR
    assert len(session.calls) == 2


def test_downloads_require_a_table(make_controller, sample_table):
    controller, _ = make_controller()
    assert controller.download_csv() is None
    assert controller.download_xlsx() is None

    controller.state.extracted_data = sample_table
    filename, content = controller.download_csv()
    assert filename.startswith("coal-log-") and filename.endswith(".csv")
    assert content == "A,B\n1,2\n3,4"


def test_successful_save_replaces_earlier_save_error(make_controller, sample_table):
    controller, _ = make_controller(FakeResponse(500), FakeResponse(200, {"success": True}))
    controller.state.extracted_data = sample_table

    controller.add_to_database()
    assert controller.state.error == SAVE_ERROR
    controller.add_to_database()

    assert controller.state.error is None
    assert controller.state.notice == SAVE_SUCCESS


def test_notice_cleared_by_upload_and_extract(make_controller, sample_table):
    controller, _ = make_controller(FakeResponse(200, {"success": True}), FakeResponse(200, TABLE_BODY))
    controller.state.extracted_data = sample_table
    controller.add_to_database()
    assert controller.state.notice == SAVE_SUCCESS

    controller.upload_file(b"\xff\xd8\xff", mime_type="image/jpeg")
    assert controller.state.notice is None

    controller.state.notice = SAVE_SUCCESS
    controller.process_image()
    assert controller.state.notice is None
