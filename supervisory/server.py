"""TCP server that collects telemetry from producers and serves it to consumers."""

from __future__ import annotations

import argparse
import socket
import socketserver
import threading
from collections.abc import Callable

from supervisory.protocol import handle_line
from supervisory.storage import DataStorage

DEFAULT_PORT = 1234
_LOCALHOST = "127.0.0.1"

MessageCallback = Callable[[str], None]


def local_ipv4_addresses() -> list[str]:
    """Return this machine's IPv4 addresses, leaving out 127.0.0.1."""
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        return []
    addresses: list[str] = []
    for *_, sockaddr in infos:
        ip = sockaddr[0]
        if ip != _LOCALHOST and ip not in addresses:
            addresses.append(ip)
    return addresses


class _ConnectionHandler(socketserver.StreamRequestHandler):
    """Serves one client connection, one command per line."""

    server: _ThreadedServer

    def handle(self) -> None:
        emit = self.server.emit
        descriptor = self.request.fileno()
        emit(f"<i>{descriptor} connecting...</i>")
        emit(f'<i>{descriptor} <font color="red">Connected! starting thread</blue></i>')
        emit(f"{descriptor} client connected")
        peer = self.client_address[0]
        try:
            for raw in self.rfile:
                line = raw.decode("utf-8", "replace").replace("\n", "").replace("\r", "")
                emit(line)
                reply = handle_line(line, peer, self.server.storage)
                if reply:
                    self.wfile.write(reply.encode("utf-8"))
        except OSError:
            pass
        finally:
            emit(f'<i>{descriptor} <font color="red">Disconnected</font></i>')


class _ThreadedServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address, storage: DataStorage, emit: MessageCallback) -> None:
        self.storage = storage
        self.emit = emit
        super().__init__(address, _ConnectionHandler)


class TelemetryServer:
    """Listens for producers and consumers, sharing one DataStorage between them."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = DEFAULT_PORT,
        storage: DataStorage | None = None,
        on_message: MessageCallback | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.storage = storage if storage is not None else DataStorage()
        self.on_message = on_message
        self.server_address: tuple[str, int] | None = None
        self._server: _ThreadedServer | None = None
        self._serving = False
        self._ip_list: list[str] = []

    def _emit(self, message: str) -> None:
        if self.on_message is not None:
            self.on_message(message)

    def start(self) -> None:
        """Bind and listen; raises OSError if the address cannot be used."""
        if self._server is not None:
            raise RuntimeError("server already started")
        try:
            server = _ThreadedServer((self.host, self.port), self.storage, self._emit)
        except OSError:
            self._emit("<b>server did not start!</b>")
            raise
        self._server = server
        self.server_address = tuple(server.server_address[:2])
        self._emit("<b>server started!</b>")
        self._ip_list = local_ipv4_addresses()

    def serve_forever(self) -> None:
        """Handle connections until shutdown() is called."""
        server = self._server
        if server is None:
            raise RuntimeError("server not started")
        self._serving = True
        server.serve_forever()

    def shutdown(self) -> None:
        """Stop serving and close the listening socket."""
        server, self._server = self._server, None
        if server is None:
            return
        if self._serving:
            server.shutdown()
            self._serving = False
        server.server_close()

    def ip_list(self) -> list[str]:
        """Return the addresses the server can be reached at."""
        return list(self._ip_list)

    def __enter__(self) -> TelemetryServer:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="supervisory-server", description="Collect and serve telemetry samples."
    )
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    server = TelemetryServer(
        args.host, args.port, on_message=lambda message: print(message, flush=True)
    )
    try:
        server.start()
    except OSError:
        return 1
    for ip in server.ip_list():
        print(ip, flush=True)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()
    return 0