"""Client that sends random telemetry samples to the server at a fixed interval."""

from __future__ import annotations

import argparse
import random
import socket
import sys
import time
from collections.abc import Iterator

from supervisory.server import DEFAULT_PORT

CONNECT_TIMEOUT = 3.0
WRITE_TIMEOUT = 1.0


class Producer:
    """Generates samples between ``minimum`` and ``maximum`` and sends them."""

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        minimum: int = 0,
        maximum: int = 100,
        rng: random.Random | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.minimum = minimum
        self.maximum = maximum
        self.rng = rng if rng is not None else random.Random()
        self._sock: socket.socket | None = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        """Connect to the server; raises OSError on failure."""
        self.disconnect()
        self._sock = socket.create_connection((self.host, self.port), timeout=CONNECT_TIMEOUT)
        self._sock.settimeout(WRITE_TIMEOUT)

    def disconnect(self) -> None:
        sock, self._sock = self._sock, None
        if sock is not None:
            sock.close()

    def make_sample(self, now_ms: int | None = None) -> str:
        """Return a ``set`` command line with a random value for ``now_ms``."""
        if self.maximum < self.minimum:
            raise ValueError("maximum is less than minimum")
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        value = self.rng.randint(self.minimum, self.maximum)
        return f"set {now_ms} {value}\r\n"

    def put_data(self) -> str | None:
        """Send one sample if connected; return the line sent, without line end."""
        if not self.connected or self.maximum < self.minimum:
            return None
        line = self.make_sample()
        try:
            self._sock.sendall(line.encode("utf-8"))
        except OSError:
            self.disconnect()
            return None
        return line.strip()

    def run(self, interval: float = 1.0, count: int | None = None) -> Iterator[str]:
        """Send a sample every ``interval`` seconds, yielding each line sent.

        Stops after ``count`` ticks if given; a non-positive interval sends nothing.
        """
        if interval <= 0:
            return
        ticks = 0
        while count is None or ticks < count:
            time.sleep(interval)
            ticks += 1
            line = self.put_data()
            if line is not None:
                yield line

    def __enter__(self) -> Producer:
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.disconnect()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="supervisory-producer", description="Send random telemetry samples."
    )
    parser.add_argument("host", nargs="?", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--min", dest="minimum", type=int, default=0)
    parser.add_argument("--max", dest="maximum", type=int, default=100)
    parser.add_argument("--interval", type=float, default=1.0)
    parser.add_argument("--count", type=int, default=None)
    args = parser.parse_args(argv)

    producer = Producer(args.host, args.port, args.minimum, args.maximum)
    try:
        producer.connect()
    except OSError:
        print("Disconnected", file=sys.stderr)
        return 1
    print("Connected", file=sys.stderr)
    try:
        for line in producer.run(args.interval, args.count):
            print(line, flush=True)
    except KeyboardInterrupt:
        pass
    finally:
        producer.disconnect()
    return 0