import json
import logging
import sys

from trustay.log import ApiCallLogger, JSONFormatter, log_store_action


def _record(msg, data=None, exc_info=None):
    record = logging.LogRecord("trustay.test", logging.WARNING, __file__, 1, msg, (), exc_info)
    if data is not None:
        record.data = data
    return record


def test_json_formatter_emits_single_line_json():
    line = JSONFormatter().format(_record("api_call", {"path": "/api/rooms", "status": 200}))
    entry = json.loads(line)
    assert "\n" not in line
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "trustay.test"
    assert entry["msg"] == "api_call"
    assert entry["data"] == {"path": "/api/rooms", "status": 200}


def test_json_formatter_includes_exception_message():
    try:
        raise ValueError("bad payload")
    except ValueError:
        exc_info = sys.exc_info()
    entry = json.loads(JSONFormatter().format(_record("boom", exc_info=exc_info)))
    assert entry["error"] == "bad payload"
    assert "data" not in entry


def test_api_call_logger_records_outcomes(caplog):
    caplog.set_level(logging.INFO, logger="trustay.api")
    with ApiCallLogger("GET", "/api/bills") as call_log:
        call_log.success(200, has_token=True)
    with ApiCallLogger("POST", "/api/bills") as call_log:
        call_log.error("The submitted data is invalid", 400)

    success, failure = caplog.records
    assert success.data["status"] == 200
    assert success.data["has_token"] is True
    assert failure.levelno == logging.WARNING
    assert failure.data["error"] == "The submitted data is invalid"


def test_failed_store_actions_log_as_warnings(caplog):
    caplog.set_level(logging.DEBUG, logger="trustay.store")
    log_store_action("rooms", "search", "skipped", reason="duplicate request")
    log_store_action("rooms", "search", "failed", error="Server error")

    skipped, failed = caplog.records
    assert skipped.levelno == logging.DEBUG
    assert failed.levelno == logging.WARNING
    assert failed.data == {"store": "rooms", "action": "search", "outcome": "failed", "error": "Server error"}
