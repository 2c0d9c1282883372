import errno
import os
import struct
from unittest import mock

import pytest

from spongenet.tun import TUNSETIFF, TapFD, TunFD, TunTapFD, build_ifreq


def _flags(request: bytes) -> int:
    return struct.unpack_from("=H", request, 16)[0]


def test_ifreq_layout():
    request = build_ifreq("tun144", True)
    assert len(request) == 40
    assert request[:16] == b"tun144".ljust(16, b"\0")
    assert request[18:] == bytes(22)


def test_ifreq_tun_flags():
    assert _flags(build_ifreq("tun144", True)) == 0x1001


def test_ifreq_tun_and_tap_differ_but_share_no_packet_info():
    tun_flags = _flags(build_ifreq("tap10", True))
    tap_flags = _flags(build_ifreq("tap10", False))
    assert tun_flags != tap_flags
    assert tun_flags & tap_flags == 0x1000


def test_ifreq_truncates_long_names_with_terminator():
    request = build_ifreq("a" * 30, False)
    assert request[:15] == b"a" * 15
    assert request[15] == 0


def test_ifreq_name_stops_at_nul():
    assert build_ifreq("tap\0junk", False)[:16] == b"tap".ljust(16, b"\0")


def test_tun_fd_opens_clone_device_and_attaches():
    read_end, write_end = os.pipe()
    os.close(write_end)
    with mock.patch("spongenet.tun.os.open", return_value=read_end) as fake_open, mock.patch(
        "spongenet.tun.fcntl.ioctl"
    ) as fake_ioctl:
        device = TunFD("tun144")
    try:
        assert fake_open.call_args.args == ("/dev/net/tun", os.O_RDWR)
        assert fake_ioctl.call_args.args == (read_end, TUNSETIFF, build_ifreq("tun144", True))
        assert device.fd_num() == read_end
        assert not device.closed()
    finally:
        device.close()


def test_tap_fd_requests_tap_mode():
    read_end, write_end = os.pipe()
    os.close(write_end)
    with mock.patch("spongenet.tun.os.open", return_value=read_end), mock.patch(
        "spongenet.tun.fcntl.ioctl"
    ) as fake_ioctl:
        device = TapFD("tap10")
    try:
        assert fake_ioctl.call_args.args[2] == build_ifreq("tap10", False)
    finally:
        device.close()


def test_failed_attach_closes_descriptor():
    read_end, write_end = os.pipe()
    os.close(write_end)
    failure = OSError(errno.EPERM, "Operation not permitted")
    with mock.patch("spongenet.tun.os.open", return_value=read_end), mock.patch(
        "spongenet.tun.fcntl.ioctl", side_effect=failure
    ):
        with pytest.raises(OSError) as caught:
            TunTapFD("tun144", True)
    assert caught.value.errno == errno.EPERM
    with pytest.raises(OSError):
        os.fstat(read_end)