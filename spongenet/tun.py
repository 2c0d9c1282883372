"""Handles to Linux TUN and TAP devices."""

from __future__ import annotations

import fcntl
import os
import struct

from .file_descriptor import FileDescriptor

CLONE_DEVICE = "/dev/net/tun"

IFNAMSIZ = 16
IFF_TUN = 0x0001
IFF_TAP = 0x0002
IFF_NO_PI = 0x1000
TUNSETIFF = 0x400454CA

# struct ifreq: interface name followed by a 24-byte union holding the flags.
_IFREQ = struct.Struct("=16sH22x")


def build_ifreq(devname: str, is_tun: bool) -> bytes:
    """The ``struct ifreq`` that attaches to device ``devname`` without packet info."""
    name = devname.encode().split(b"\0", 1)[0][: IFNAMSIZ - 1]
    flags = (IFF_TUN if is_tun else IFF_TAP) | IFF_NO_PI
    return _IFREQ.pack(name, flags)


class TunTapFD(FileDescriptor):
    """A descriptor for an existing persistent TUN (IP) or TAP (Ethernet) device."""

    def __init__(self, devname: str, is_tun: bool) -> None:
        fd = os.open(CLONE_DEVICE, os.O_RDWR)
        super().__init__(fd)
        try:
            fcntl.ioctl(fd, TUNSETIFF, build_ifreq(devname, is_tun))
        except OSError:
            self.close()
            raise


class TunFD(TunTapFD):
    """A descriptor for a TUN device, which carries IP datagrams."""

    def __init__(self, devname: str) -> None:
        super().__init__(devname, True)


class TapFD(TunTapFD):
    """A descriptor for a TAP device, which carries Ethernet frames."""

    def __init__(self, devname: str) -> None:
        super().__init__(devname, False)