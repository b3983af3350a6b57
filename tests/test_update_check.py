import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from krewkit.update_check import (
    fetch_latest_tag,
    is_development_build,
    should_check_for_upgrade,
    upgrade_notification,
)


def _serve(body: bytes, status: int = 200):
    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server


@pytest.fixture
def serve():
    servers = []

    def start(body: str, status: int = 200) -> str:
        server = _serve(body.encode(), status)
        servers.append(server)
        host, port = server.server_address[:2]
        return f"http://{host}:{port}/"

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def test_fetch_latest_tag_broken_json(serve):
    url = serve('{"tag_name"::]')
    with pytest.raises(ValueError):
        fetch_latest_tag(url, 5)


def test_fetch_latest_tag_field_missing(serve):
    url = serve("{}")
    assert fetch_latest_tag(url, 5) == ""


def test_fetch_latest_tag_correct_tag(serve):
    url = serve('{"tag_name": "some_tag"}')
    assert fetch_latest_tag(url, 5) == "some_tag"


def test_fetch_latest_tag_bad_status(serve):
    url = serve('{"tag_name": "some_tag"}', status=500)
    with pytest.raises(OSError, match="200 OK"):
        fetch_latest_tag(url, 5)


def test_fetch_latest_tag_failure():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    with pytest.raises(OSError):
        fetch_latest_tag(f"http://127.0.0.1:{port}/nirvana", 5)


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("v0.4.1", False),
        ("0.4.1", False),
        ("v1.0.0-rc.1", False),
        ("", True),
        ("dev", True),
        ("v0.4", True),
    ],
)
def test_is_development_build(tag, expected):
    assert is_development_build(tag) is expected


def test_upgrade_notification_newer():
    notice = upgrade_notification("v0.4.0", "v0.4.1")
    assert notice == (
        "A newer version of krew is available (v0.4.0 -> v0.4.1).\n"
        'Run "kubectl krew upgrade" to get the newest version!\n'
    )


@pytest.mark.parametrize(
    "current, latest",
    [
        ("v0.4.1", "v0.4.1"),
        ("v0.5.0", "v0.4.1"),
        ("v0.4.1", ""),
        ("v0.4.1", "garbage"),
        ("dev", "v0.4.1"),
    ],
)
def test_upgrade_notification_none(current, latest):
    assert upgrade_notification(current, latest) is None


class _FixedRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def test_should_check_for_upgrade_within_rate(monkeypatch):
    monkeypatch.delenv("KREW_NO_UPGRADE_CHECK", raising=False)
    assert should_check_for_upgrade("v0.4.1", 0.4, _FixedRandom(0.1)) is True


def test_should_check_for_upgrade_outside_rate(monkeypatch):
    monkeypatch.delenv("KREW_NO_UPGRADE_CHECK", raising=False)
    assert should_check_for_upgrade("v0.4.1", 0.4, _FixedRandom(0.9)) is False


def test_should_check_for_upgrade_disabled_by_env(monkeypatch):
    monkeypatch.setenv("KREW_NO_UPGRADE_CHECK", "1")
    assert should_check_for_upgrade("v0.4.1", 1.0, _FixedRandom(0.0)) is False


def test_should_check_for_upgrade_dev_build(monkeypatch):
    monkeypatch.delenv("KREW_NO_UPGRADE_CHECK", raising=False)
    assert should_check_for_upgrade("dev", 1.0, _FixedRandom(0.0)) is False