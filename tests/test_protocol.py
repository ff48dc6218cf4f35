import pytest

from supervisory.protocol import format_number, handle_line
from supervisory.storage import DataStorage

PEER = "192.168.1.5"


@pytest.fixture
def storage():
    return DataStorage()


def test_set_then_get_example(storage):
    assert handle_line("set 1496156112708 9.16666\r\n", PEER, storage) == ""
    assert handle_line("get 192.168.1.5 30\r\n", PEER, storage) == "1496156112708 9.16666\n"


def test_list_after_set(storage):
    handle_line("set 1 2", "127.0.0.1", storage)
    assert handle_line("list\r\n", PEER, storage) == "127.0.0.1\r\n"


def test_list_empty_storage(storage):
    assert handle_line("list", PEER, storage) == ""


def test_get_limits_number_of_samples(storage):
    for t in range(5):
        handle_line(f"set {t} {t}", PEER, storage)
    reply = handle_line(f"get {PEER} 2", PEER, storage)
    assert reply.splitlines() == ["3 3", "4 4"]


def test_get_with_non_numeric_count_gives_nothing(storage):
    handle_line("set 1 1", PEER, storage)
    assert handle_line(f"get {PEER} many", PEER, storage) == ""


def test_get_with_invalid_address(storage):
    handle_line("set 1 1", PEER, storage)
    assert handle_line("get nowhere 3", PEER, storage) == ""


def test_get_wrong_argument_count(storage):
    handle_line("set 1 1", PEER, storage)
    assert handle_line(f"get {PEER}", PEER, storage) == ""


@pytest.mark.parametrize(
    "line",
    ["set abc 1.0", "set 10 abc", "set 10", "set 10 1.0 extra", "set 99999999999999999999 1", "set 10 1e40", "set  10 1"],
)
def test_malformed_set_is_ignored(storage, line):
    handle_line(line, PEER, storage)
    assert storage.host_list() == []


def test_set_accepts_negative_and_exponent(storage):
    handle_line("set -5 -2.5e1", PEER, storage)
    [entry] = storage.get_data(PEER, 1)
    assert (entry.time, entry.measurement) == (-5, -25.0)


def test_unknown_command(storage):
    assert handle_line("hello world", PEER, storage) == ""


def test_format_number_integer_is_exact():
    assert format_number(1496156112708) == "1496156112708"


def test_format_number_float_six_digits():
    assert format_number(2.0) == "2"
    assert format_number(9.16666) == "9.16666"