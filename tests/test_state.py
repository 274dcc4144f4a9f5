import pytest

from nginx_cache_sync.common.exceptions import StateError
from nginx_cache_sync.common.state import MarkerStore


def test_absent_file_reads_empty(tmp_path):
    store = MarkerStore(tmp_path / "nginx-cache-sync.last")

    assert store.read() == ""
    assert not store.exists()


def test_read_strips_whitespace(tmp_path):
    path = tmp_path / "nginx-cache-sync.last"
    path.write_text("2024-01-01T00:00:00Z\n")

    assert MarkerStore(path).read() == "2024-01-01T00:00:00Z"


def test_write_creates_parent_and_overwrites(tmp_path):
    store = MarkerStore(tmp_path / "run" / "nginx-cache-sync.last")

    store.write("A")
    store.write("B")

    assert store.exists()
    assert store.path.read_text() == "B"


def test_unreadable_path_reads_empty(tmp_path):
    # A directory where the file should be
    assert MarkerStore(tmp_path).read() == ""


def test_write_failure_raises_state_error(tmp_path):
    store = MarkerStore(tmp_path)

    with pytest.raises(StateError) as exc_info:
        store.write("A")
    assert exc_info.value.path == str(tmp_path)


def test_write_keeps_whitespace_read_strips_it(tmp_path):
    store = MarkerStore(tmp_path / "nginx-cache-sync.last")

    store.write("1714557600 \n")

    assert store.path.read_text() == "1714557600 \n"
    assert store.read() == "1714557600"
