"""Line-based command protocol of the telemetry server: list, get and set."""

from __future__ import annotations

import ipaddress
import math
import re
import struct

from supervisory.storage import DataStorage, _ipv4_key

_INT_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)
_UINT_RE = re.compile(r"\+?[0-9]+", re.ASCII)
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.ASCII | re.IGNORECASE,
)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT32_MAX = 2**32 - 1
_FLOAT32_MAX = struct.unpack("f", struct.pack("I", 0x7F7FFFFF))[0]


def format_number(value) -> str:
    """Format a number the way values are written on the wire.

    Integers are written in full; other numbers use six significant digits.
    """
    if isinstance(value, int):
        return str(value)
    return "%g" % value


def _parse_int64(text: str) -> int | None:
    text = text.strip()
    if not _INT_RE.fullmatch(text):
        return None
    number = int(text)
    return number if _INT64_MIN <= number <= _INT64_MAX else None


def _parse_uint32(text: str) -> int:
    text = text.strip()
    if not _UINT_RE.fullmatch(text):
        return 0
    number = int(text)
    return number if number <= _UINT32_MAX else 0


def _parse_float32(text: str) -> float | None:
    text = text.strip()
    if not _FLOAT_RE.fullmatch(text):
        return None
    number = float(text)
    if math.isfinite(number) and abs(number) > _FLOAT32_MAX:
        return None
    return number


def _list_hosts(storage: DataStorage) -> str:
    return "".join(f"{host}\r\n" for host in storage.host_list())


def _get(args: list[str], storage: DataStorage) -> str:
    host, count = args
    samples = _parse_uint32(count)
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return ""
    return "".join(
        f"{format_number(entry.time)} {format_number(entry.measurement)}\n"
        for entry in storage.get_data(address, samples)
    )


def _set(args: list[str], peer_address, storage: DataStorage) -> str:
    time_text, value_text = args
    msecdate = _parse_int64(time_text)
    if msecdate is None:
        return ""
    measurement = _parse_float32(value_text)
    if measurement is None:
        return ""
    storage.add_data(peer_address, msecdate, measurement)
    return ""


def handle_line(line: str, peer_address, storage: DataStorage) -> str:
    """Execute one command line from a client and return the reply text.

    ``list`` replies with one host per line, ``get <ip> <n>`` with the last
    ``n`` samples of that host and ``set <ms> <value>`` stores a sample for
    ``peer_address``. Unknown or malformed commands give an empty reply.
    """
    parts = line.replace("\n", "").replace("\r", "").split(" ")
    command, args = parts[0], parts[1:]
    if command == "list":
        return _list_hosts(storage)
    if command == "get" and len(args) == 2:
        return _get(args, storage)
    if command == "set" and len(args) == 2:
        _ipv4_key(peer_address)
        return _set(args, peer_address, storage)
    return ""