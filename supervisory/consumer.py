"""Client that fetches host lists and recent samples from the server."""

from __future__ import annotations

import argparse
import socket
import sys
import time
from collections.abc import Iterable

from supervisory.plotter import Plotter
from supervisory.protocol import _FLOAT_RE, _parse_int64, format_number
from supervisory.server import DEFAULT_PORT

CONNECT_TIMEOUT = 3.0
DEFAULT_SAMPLES = 30

Point = tuple[float, float]


def _parse_double(text: str) -> float:
    text = text.strip()
    if not _FLOAT_RE.fullmatch(text):
        return 0.0
    return float(text)


def parse_response(lines: Iterable[str]) -> tuple[list[str], list[Point]]:
    """Split server reply lines into host addresses and (time, value) points.

    A line with one word is a host; a line with two words is a sample whose
    time must be an integer. Empty lines and an echoed ``list`` are skipped.
    """
    hosts: list[str] = []
    points: list[Point] = []
    for raw in lines:
        line = raw.strip().replace('"', "")
        if not line or line.lower() == "list":
            continue
        parts = line.split(" ")
        if len(parts) == 1:
            if parts[0] not in hosts:
                hosts.append(parts[0])
        elif len(parts) == 2:
            stamp = _parse_int64(parts[0])
            if stamp is not None:
                points.append((float(stamp), _parse_double(parts[1])))
    return hosts, points


class Consumer:
    """Connection to the server that keeps the known hosts and latest points."""

    def __init__(self, host: str, port: int = DEFAULT_PORT) -> None:
        self.host = host
        self.port = port
        self.hosts: list[str] = []
        self.points: list[Point] = []
        self.plotter = Plotter(600, 400)
        self.read_timeout = 0.5
        self._sock: socket.socket | None = None
        self._buffer = b""

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        """Connect to the server; raises OSError on failure."""
        self.disconnect()
        self._sock = socket.create_connection((self.host, self.port), timeout=CONNECT_TIMEOUT)
        self._buffer = b""

    def disconnect(self) -> None:
        sock, self._sock = self._sock, None
        if sock is not None:
            sock.close()

    def _send(self, text: str) -> None:
        if self._sock is not None:
            self._sock.sendall(text.encode("utf-8"))

    def request_host_list(self) -> None:
        """Ask the server for the hosts that have data."""
        self._send("list\r\n")

    def request_data(self, ip: str | None, samples: int = DEFAULT_SAMPLES) -> None:
        """Clear the points and ask for the last ``samples`` samples of ``ip``."""
        self.points = []
        if not self.connected or not ip:
            return
        self._send(f"get {ip} {samples}\r\n")

    def _receive(self) -> bytes:
        chunks = []
        self._sock.settimeout(self.read_timeout)
        while True:
            try:
                chunk = self._sock.recv(4096)
            except socket.timeout:
                break
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def read_data(self) -> list[Point]:
        """Read the complete lines received so far and return the points."""
        if self._sock is not None:
            self._buffer += self._receive()
        *complete, self._buffer = self._buffer.split(b"\n")
        hosts, points = parse_response(line.decode("utf-8", "replace") for line in complete)
        for host in hosts:
            if host not in self.hosts:
                self.hosts.append(host)
        self.points.extend(points)
        self.plotter.set_data(self.points)
        return list(self.points)

    def __enter__(self) -> Consumer:
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.disconnect()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="supervisory-consumer", description="Fetch telemetry samples from the server."
    )
    parser.add_argument("host", nargs="?", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--ip", default=None)
    parser.add_argument("--samples", type=int, default=DEFAULT_SAMPLES)
    parser.add_argument("--interval", type=float, default=1.0)
    parser.add_argument("--count", type=int, default=1)
    args = parser.parse_args(argv)

    consumer = Consumer(args.host, args.port)
    try:
        consumer.connect()
    except OSError:
        print("Disconnected", file=sys.stderr)
        return 1
    print("Connected", file=sys.stderr)
    try:
        consumer.request_host_list()
        consumer.read_data()
        if args.ip is None:
            for host in consumer.hosts:
                print(host)
            return 0
        for tick in range(args.count):
            if tick:
                time.sleep(args.interval)
            consumer.request_data(args.ip, args.samples)
            for stamp, value in consumer.read_data():
                print(f"{int(stamp)} {format_number(value)}", flush=True)
    except KeyboardInterrupt:
        pass
    finally:
        consumer.disconnect()
    return 0