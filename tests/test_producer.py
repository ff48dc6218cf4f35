import random
import socket
import threading
import time

import pytest

from supervisory.producer import Producer, main
from supervisory.server import TelemetryServer


@pytest.fixture
def running_server():
    server = TelemetryServer("127.0.0.1", 0)
    server.start()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    thread.join(timeout=5)


@pytest.fixture
def closed_port():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


def test_make_sample_fixed_range():
    producer = Producer("127.0.0.1", minimum=7, maximum=7)
    assert producer.make_sample(1000) == "set 1000 7\r\n"


def test_make_sample_values_in_range():
    producer = Producer("127.0.0.1", minimum=0, maximum=5, rng=random.Random(1))
    for _ in range(50):
        command, stamp, value = producer.make_sample(42).strip().split(" ")
        assert command == "set"
        assert stamp == "42"
        assert 0 <= int(value) <= 5


def test_make_sample_rejects_inverted_range():
    producer = Producer("127.0.0.1", minimum=10, maximum=3)
    with pytest.raises(ValueError):
        producer.make_sample(1)


def test_put_data_without_connection():
    producer = Producer("127.0.0.1")
    assert producer.connected is False
    assert producer.put_data() is None


def test_run_with_non_positive_interval_sends_nothing():
    producer = Producer("127.0.0.1")
    assert list(producer.run(0, 3)) == []


def test_run_unconnected_yields_nothing():
    producer = Producer("127.0.0.1")
    assert list(producer.run(0.001, 2)) == []


def test_connect_refused(closed_port):
    producer = Producer("127.0.0.1", closed_port)
    with pytest.raises(OSError):
        producer.connect()
    assert producer.connected is False


def test_samples_reach_storage(running_server):
    host, port = running_server.server_address
    with Producer(host, port, minimum=1, maximum=9, rng=random.Random(3)) as producer:
        lines = list(producer.run(0.01, 3))
    assert len(lines) == 3
    deadline = time.monotonic() + 5
    while time.monotonic() < deadline and len(running_server.storage.get_data(host, 10)) < 3:
        time.sleep(0.01)
    entries = running_server.storage.get_data(host, 10)
    assert [entry.time for entry in entries] == [int(line.split(" ")[1]) for line in lines]
    assert [entry.measurement for entry in entries] == [float(line.split(" ")[2]) for line in lines]


def test_put_data_inverted_range_sends_nothing(running_server):
    host, port = running_server.server_address
    with Producer(host, port, minimum=5, maximum=1) as producer:
        assert producer.put_data() is None


def test_main_fails_when_unreachable(closed_port):
    assert main(["127.0.0.1", "--port", str(closed_port), "--count", "1"]) == 1