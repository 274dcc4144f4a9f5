import json
import logging
import sys

from nginx_cache_sync.common.logging_setup import (
    LOG_PREFIX,
    JsonFormatter,
    TextFormatter,
    configure_logging,
    get_logger,
    log_fields,
)


def make_record(msg="Cache cleared successfully", exc_info=None, **fields):
    record = logging.LogRecord(
        name="nginx_cache_sync.sync",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    if fields:
        record.fields = fields
    return record


def test_json_line_carries_prefix_and_fields():
    record = make_record(path="/var/run/nginx-cache/", files_removed=12)

    data = json.loads(JsonFormatter().format(record))

    assert data["msg"] == f"{LOG_PREFIX} Cache cleared successfully"
    assert data["level"] == "info"
    assert data["logger"] == "nginx_cache_sync.sync"
    assert data["path"] == "/var/run/nginx-cache/"
    assert data["files_removed"] == 12
    assert "time" in data


def test_json_fields_cannot_shadow_message():
    record = make_record("No cache change detected")
    record.fields = {"msg": "spoofed", "level": "critical"}

    data = json.loads(JsonFormatter().format(record))

    assert data["msg"] == f"{LOG_PREFIX} No cache change detected"
    assert data["level"] == "info"


def test_json_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = make_record("Unexpected error in sync cycle", exc_info=sys.exc_info())

    data = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in data["exception"]


def test_text_line_appends_key_values():
    record = make_record("Error clearing cache", path="/srv/cache", method="find")

    line = TextFormatter().format(record)

    assert f"INFO {LOG_PREFIX} Error clearing cache path=/srv/cache method=find" in line


def test_log_fields_payload():
    assert log_fields(host="db", marker="A") == {"fields": {"host": "db", "marker": "A"}}


def test_configure_logging_sets_level_and_format():
    root = logging.getLogger("nginx_cache_sync")
    try:
        configure_logging("debug", json_format=False)

        assert root.level == logging.DEBUG
        assert root.propagate is False
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

        configure_logging()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers.clear()
        root.propagate = True
        root.setLevel(logging.NOTSET)


def test_get_logger_is_package_child():
    assert get_logger("sync.purger").name == "nginx_cache_sync.sync.purger"
