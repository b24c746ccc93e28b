import threading
import urllib.request
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from utilkit import rawparams
from utilkit.orderedparams import OrderedParams

SQLI = "1+AND+(SELECT+*+FROM+(SELECT(SLEEP(12)))nQIP)"
XSS = "<script>alert('XSS')</script>"
XSS_SPACE = "<svg id=alert(1) onload=eval(id)>"
JS = "javascript://alert(1)"


@pytest.fixture
def capture_server():
    seen = []

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            seen.append(self.path)
            self.send_response(200)
            self.send_header("Content-Length", "0")
            self.end_headers()

        def log_message(self, *args):
            pass

    server = HTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server.server_address[1], seen
    server.shutdown()
    server.server_close()


def test_ordered_param_encode():
    p = OrderedParams()
    p.add("sqli", SQLI)
    p.add("xss", XSS)
    p.add("xssiwthspace", XSS_SPACE)
    p.add("jsprotocol", JS)
    expected = (
        "sqli=1+AND+(SELECT+*+FROM+(SELECT(SLEEP(12)))nQIP)&xss=<script>alert('XSS')</script>"
        "&xssiwthspace=<svg+id=alert(1)+onload=eval(id)>&jsprotocol=javascript://alert(1)"
    )
    assert p.encode() == expected


def test_ordered_param_integration(capture_server):
    port, seen = capture_server
    expected = (
        "/?xss=<script>alert('XSS')</script>&sqli=1+AND+(SELECT+*+FROM+(SELECT(SLEEP(12)))nQIP)"
        "&jsprotocol=javascript://alert(1)&xssiwthspace=<svg+id=alert(1)+onload=eval(id)>"
    )
    p = OrderedParams()
    p.add("xss", XSS)
    p.add("sqli", SQLI)
    p.add("jsprotocol", JS)
    p.add("xssiwthspace", XSS_SPACE)
    with urllib.request.urlopen(f"http://127.0.0.1:{port}/?{p.encode()}") as resp:
        assert resp.status == 200
    assert seen == [expected]


def test_decode_preserves_order():
    p = OrderedParams()
    p.decode("sqli=" + SQLI + "&xss=" + XSS)
    assert p.get("sqli") == SQLI
    assert p.get("xss") == XSS
    assert [key for key, _ in p.items()] == ["sqli", "xss"]


def test_decode_round_trip():
    raw = "z=1&a=2&z=3&flag"
    p = OrderedParams()
    p.decode(raw)
    assert p.encode() == "z=1&z=3&a=2&flag"
    assert p.get_all("z") == ["1", "3"]


def test_add_set_get_delete():
    p = OrderedParams()
    assert p.is_empty()
    p.add("a", "1")
    p.add("b", "2")
    p.add("a", "3")
    assert p.get_all("a") == ["1", "3"]
    p.set("a", "4")
    assert p.get("a") == "4"
    assert [key for key, _ in p.items()] == ["a", "b"]
    p.delete("a")
    assert not p.has("a")
    assert p.get("a") == ""
    assert p.get_all("a") == []
    assert len(p) == 1


def test_update_replaces_values():
    p = OrderedParams()
    p.update("k", ["x", "y"])
    assert p.get_all("k") == ["x", "y"]
    assert p.encode() == "k=x&k=y"


def test_merge_appends():
    p = OrderedParams()
    p.add("admin", "true")
    p.merge("yes=true&admin=false")
    assert p.encode() == "admin=true&admin=false&yes=true"


def test_clone_is_independent():
    p = OrderedParams()
    p.add("a", "1")
    p.add("empty")
    copy = p.clone()
    assert copy.get("a") == "1"
    assert copy.get_all("empty") == [""]
    copy.add("a", "2")
    assert p.get_all("a") == ["1"]
    assert copy.get_all("a") == ["1", "2"]


def test_equality():
    p = OrderedParams()
    p.decode("a=1&b=2")
    q = OrderedParams()
    q.decode("a=1&b=2")
    r = OrderedParams()
    r.decode("b=2&a=1")
    assert p == q
    assert not p == r


def test_decode_semicolon(monkeypatch):
    monkeypatch.setattr(rawparams, "allow_legacy_separator", True)
    p = OrderedParams()
    p.decode("a=1;b=2")
    assert p.get_all("a") == ["1"]
    assert p.get_all("b") == ["2"]