# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
# pyright: reportMissingParameterType=false
import gzip
import json
import os
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class _ConsoleHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        pass

    def _send(self, status, body, headers=None):
        self.send_response(status)
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _echo_headers(self):
        payload = json.dumps(
            {name.lower(): value for name, value in self.headers.items()}
        )
        self._send(
            200,
            payload.encode("utf-8"),
            {"Content-Type": "application/json"},
        )

    def do_HEAD(self):
        self._send(200, b"", {"Content-Type": "text/plain"})

    def do_GET(self):
        if self.path == "/text":
            self._send(
                200,
                "café".encode("utf-8"),
                {"Content-Type": "text/plain; charset=utf-8"},
            )
        elif self.path == "/gzip":
            self._send(
                200,
                gzip.compress(b"hello world"),
                {"Content-Type": "text/plain", "Content-Encoding": "gzip"},
            )
        elif self.path == "/empty":
            self._send(200, b"", {"Content-Type": "text/plain"})
        elif self.path == "/headers":
            self._echo_headers()
        elif self.path == "/redirect":
            self._send(302, b"", {"Location": "/text"})
        else:
            self._send(404, b"not found", {"Content-Type": "text/plain"})

    def do_POST(self):
        length = int(self.headers.get("Content-Length", "0"))
        body = self.rfile.read(length)
        self._send(
            200,
            body,
            {"Content-Type": self.headers.get("Content-Type", "text/plain")},
        )


@pytest.fixture
def console_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _ConsoleHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


_BROKEN_GZIP_BODY = gzip.compress(os.urandom(4000))


def _broken_reply(conn, path, release):
    if path == "/done":
        conn.sendall(
            b"HTTP/1.1 200 OK\r\nContent-Length: 2\r\n"
            b"Connection: close\r\n\r\nok"
        )
        return
    if path == "/truncated-redirect":
        status = b"302 Found\r\nLocation: /done"
    else:
        status = b"200 OK"
    head = (
        b"HTTP/1.1 " + status + b"\r\n"
        b"Content-Type: text/plain\r\n"
        b"Content-Encoding: gzip\r\n"
        b"Content-Length: " + str(len(_BROKEN_GZIP_BODY)).encode() + b"\r\n"
        b"\r\n"
    )
    conn.sendall(head + _BROKEN_GZIP_BODY[:200])
    if path == "/stall":
        release.wait(5)


def _serve_broken_connection(conn, release):
    with conn:
        data = b""
        while b"\r\n\r\n" not in data:
            chunk = conn.recv(4096)
            if not chunk:
                return
            data += chunk
        path = data.split(b"\r\n", 1)[0].split(b" ")[1].decode()
        _broken_reply(conn, path, release)


@pytest.fixture
def broken_server():
    """Server whose gzip bodies stop after 200 of their declared bytes.

    ``/truncated`` closes the connection, ``/stall`` keeps it open without
    sending more, ``/truncated-redirect`` is a truncated 302 to ``/done``.
    """
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(16)
    listener.settimeout(0.1)
    stop = threading.Event()
    release = threading.Event()

    def accept_loop():
        while not stop.is_set():
            try:
                conn, _ = listener.accept()
            except socket.timeout:
                continue
            threading.Thread(
                target=_serve_broken_connection,
                args=(conn, release),
                daemon=True,
            ).start()

    thread = threading.Thread(target=accept_loop, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{listener.getsockname()[1]}"
    finally:
        release.set()
        stop.set()
        thread.join()
        listener.close()
