"""Thread-safe in-memory store of telemetry samples, keyed by producer IPv4 address."""

from __future__ import annotations

import ipaddress
import struct
import threading
from dataclasses import dataclass
from typing import Union

Address = Union[str, int, ipaddress.IPv4Address, ipaddress.IPv6Address]


def _to_float32(value: float) -> float:
    """Round a number to single precision, as the measurements are kept."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _ipv4_key(address: Address) -> int:
    """Return the 32-bit key for an address.

    IPv4-mapped IPv6 addresses map to their IPv4 form; any other IPv6
    address maps to 0. Raises ValueError for an invalid address.
    """
    if isinstance(address, int) and not isinstance(address, bool):
        return int(ipaddress.IPv4Address(address))
    ip = address if isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)) else ipaddress.ip_address(address)
    if isinstance(ip, ipaddress.IPv4Address):
        return int(ip)
    mapped = ip.ipv4_mapped
    return int(mapped) if mapped is not None else 0


@dataclass(frozen=True)
class Entry:
    """One sample: time in milliseconds since the epoch and the measured value."""

    time: int
    measurement: float


class DataStorage:
    """Samples per producer host, shared between connections."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[int, list[Entry]] = {}

    def get_data(self, address: Address, lastn: int = 2) -> list[Entry]:
        """Return at most the last ``lastn`` entries stored for ``address``."""
        key = _ipv4_key(address)
        with self._lock:
            entries = self._data.get(key)
            if entries is None:
                return []
            if len(entries) <= lastn:
                return list(entries)
            return entries[len(entries) - lastn:]

    def add_data(self, address: Address, time: int, measurement: float) -> None:
        """Append a sample for ``address``."""
        key = _ipv4_key(address)
        entry = Entry(int(time), _to_float32(measurement))
        with self._lock:
            self._data.setdefault(key, []).append(entry)

    def host_list(self) -> list[ipaddress.IPv4Address]:
        """Return the addresses that have data, in ascending numeric order."""
        with self._lock:
            keys = sorted(self._data)
        return [ipaddress.IPv4Address(key) for key in keys]