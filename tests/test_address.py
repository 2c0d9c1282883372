import socket

import pytest

from spongenet.address import Address


def test_numeric_address_and_port():
    address = Address("127.0.0.1", 8080)
    assert address.ip_port() == ("127.0.0.1", 8080)
    assert address.ip() == "127.0.0.1"
    assert address.port() == 8080


def test_string_form():
    assert str(Address("8.8.8.8", 53)) == "8.8.8.8:53"


def test_zero_host_means_any():
    address = Address("0", 0)
    assert address.ip() == "0.0.0.0"
    assert address.port() == 0


def test_default_port_is_zero():
    assert Address("10.1.2.3").port() == 0


def test_service_string_is_resolved():
    address = Address("127.0.0.1", "53")
    assert address.ip_port() == ("127.0.0.1", 53)


def test_ipv4_numeric_value():
    assert Address("1.2.3.4", 0).ipv4_numeric() == 0x01020304


def test_from_ipv4_numeric_round_trip():
    for value in (0, 0x7F000001, 0xA9FE9009, 0xFFFFFFFF):
        assert Address.from_ipv4_numeric(value).ipv4_numeric() == value


def test_from_ipv4_numeric_text():
    assert Address.from_ipv4_numeric(0x7F000001).ip() == "127.0.0.1"


def test_from_ipv4_numeric_out_of_range():
    with pytest.raises(ValueError):
        Address.from_ipv4_numeric(1 << 32)


def test_equality_and_hash():
    first = Address("169.254.144.9", 1234)
    second = Address("169.254.144.9", 1234)
    assert first == second
    assert hash(first) == hash(second)
    assert first != Address("169.254.144.9", 1235)
    assert first != Address("169.254.144.1", 1234)
    assert len({first, second}) == 1


def test_from_sockaddr_matches_constructor():
    assert Address.from_sockaddr(("10.0.0.1", 53)) == Address("10.0.0.1", 53)


def test_to_sockaddr_round_trip():
    address = Address("192.168.0.7", 443)
    assert address.to_sockaddr() == ("192.168.0.7", 443)
    assert Address.from_sockaddr(address.to_sockaddr()) == address


def test_to_sockaddr_usable_with_socket():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(Address("127.0.0.1", 0).to_sockaddr())
        bound = Address.from_sockaddr(sock.getsockname())
    assert bound.ip() == "127.0.0.1"
    assert bound.port() > 0


def test_ipv6_address_has_no_ipv4_numeric():
    address = Address.from_sockaddr(("::1", 80, 0, 0))
    assert address.ip_port() == ("::1", 80)
    with pytest.raises(ValueError):
        address.ipv4_numeric()


def test_invalid_numeric_host_raises():
    with pytest.raises(OSError):
        Address("not-an-address", 80)


def test_port_out_of_range_raises():
    with pytest.raises(ValueError):
        Address("127.0.0.1", 70000)


def test_bad_sockaddr_shape_raises():
    with pytest.raises(ValueError):
        Address.from_sockaddr(("127.0.0.1",))