# spongenet

spongenet holds the parts that a user-space TCP/IP stack is built from:

- parsers and serializers for Ethernet, ARP, IPv4 and TCP
- the Internet checksum
- thin wrappers over POSIX file descriptors, sockets and Linux TUN/TAP devices
- a `poll`-based event loop
- adapters that carry TCP segments over UDP or over raw IPv4 on a TUN device

It has no dependencies outside the standard library. It needs a POSIX system, and opening TUN or TAP devices needs Linux.

## Installing

```
pip install spongenet
```

To run the test suite, install the `test` extra and then run `pytest`:

```
pip install "spongenet[test]"
pytest
```

## Modules

### Basics

- `spongenet.util`
  - `InternetChecksum(initial_sum=0)`, with `add(data)` and `value()`.
  - `format_hexdump(data, indent=0)` and `hexdump(data, indent=0, file=None)`.
  - `timestamp_ms()`, the milliseconds since the module was loaded.
  - `get_random_generator()`, a `random.Random` seeded from OS entropy.
- `spongenet.buffer`
  - `Buffer` is a read-only byte string. `remove_prefix(n)` drops bytes from its front.
  - `BufferList` is a list of buffers that need not be contiguous. It has `append`, `remove_prefix`, `concatenate` and `to_buffer`.
  - `BufferViewList` holds memory views for scatter-gather writes.
- `spongenet.parser`
  - `NetParser` reads big-endian `u8`, `u16` and `u32` values and records the first error it meets.
  - `pack_u8`, `pack_u16` and `pack_u32` serialize integers.
  - The module also holds the `ParseResult` enum, `as_string` and the `ParseError` exception.

### Addresses, descriptors, sockets and the event loop

- `spongenet.address`
  - `Address(host, port)` is an IPv4 address and port.
  - When `port` is an integer, `host` must be a dotted quad.
  - When `port` is a string, it is a service name and the host name is resolved.
  - `Address` also has `from_sockaddr`, `from_ipv4_numeric`, `ipv4_numeric`, `ip`, `port` and `to_sockaddr`.
- `spongenet.file_descriptor`
  - `FileDescriptor` tracks EOF, closing, and how many reads and writes it has had.
  - `duplicate()` returns a handle that shares the same descriptor.
  - A `FileDescriptor` can be used as a context manager.
- `spongenet.sockets`
  - `UDPSocket`, `TCPSocket` and `LocalStreamSocket`.
  - `ReceivedDatagram`.
  - `local_stream_socket_pair()`.
- `spongenet.tun`
  - `TunFD`, `TapFD` and `TunTapFD` open an existing persistent device.
  - `build_ifreq` builds the `ioctl` request for such a device.
- `spongenet.eventloop`
  - `EventLoop` runs a callback when a descriptor becomes readable (`Direction.IN`) or writable (`Direction.OUT`).
  - `wait_next_event(timeout_ms)` returns an `EventLoopResult`: `SUCCESS`, `TIMEOUT` or `EXIT`.
  - If a callback neither reads nor writes its descriptor and the rule stays interested, the loop raises `RuntimeError`.

### Wire formats

Every `parse` classmethod raises `ParseError` when its input is malformed. The exception's `result` attribute says what was wrong, for example `ParseResult.BAD_CHECKSUM` or `ParseResult.PACKET_TOO_SHORT`.

- `spongenet.ethernet_header`
  - `EthernetHeader`.
  - `format_ethernet_address`.
  - `ETHERNET_BROADCAST`.
- `spongenet.ethernet_frame`
  - `EthernetFrame`.
- `spongenet.arp_message`
  - `ARPMessage`, for Ethernet/IPv4 requests and replies only.
- `spongenet.ipv4_header`
  - `IPv4Header`, with `payload_length()`, `pseudo_cksum()` and `summary()`.
  - `format_ipv4`.
- `spongenet.ipv4_datagram`
  - `IPv4Datagram`. Its `serialize()` fills in the header checksum.
- `spongenet.tcp_header`
  - `TCPHeader`, with `summary()`.
  - Its equality check compares every field except the ports and the checksum.
- `spongenet.tcp_segment`
  - `TCPSegment`, with `length_in_sequence_space()`.
  - `parse` and `serialize` take the pseudo-header sum of the datagram that carries the segment.

### TCP support and adapters

- `spongenet.tcp_config`
  - `TCPConfig` holds timeouts, capacities and an optional fixed ISN.
  - `FdAdapterConfig` holds the source and destination addresses and the loss rates.
- `spongenet.tcp_state`
  - The `State` enum holds the official TCP state names.
  - The `SenderSummary` and `ReceiverSummary` enums describe the two halves of a connection.
  - `TCPState.from_state` gives the state that goes with an official name.
  - `TCPState.from_endpoints` summarises a sender and a receiver that you supply.
- `spongenet.fd_adapter`
  - `FdAdapterBase` has a `config`, a `listening` flag and `tick`.
  - `TCPOverUDPSocketAdapter` carries segments as UDP payloads.
  - When the adapter is listening, the first SYN without RST fixes the peer.
- `spongenet.lossy_fd_adapter`
  - `LossyFdAdapter` wraps any adapter and drops reads and writes at random.
  - The drop rates come from the wrapped adapter's `loss_rate_dn` and `loss_rate_up`, counted out of 65536.
- `spongenet.tcp_over_ip`
  - `TCPOverIPv4Adapter` has `wrap_tcp_in_ip` and `unwrap_tcp_in_ip`.
  - `unwrap_tcp_in_ip` filters incoming datagrams by address, protocol and port.
- `spongenet.tuntap_adapter`
  - `TCPOverIPv4OverTunFdAdapter` reads and writes IPv4 datagrams on a TUN device.

## Examples

Build a TCP segment, serialize it with its checksum, and parse it back:

```python
from spongenet.tcp_header import TCPHeader
from spongenet.tcp_segment import TCPSegment

seg = TCPSegment(header=TCPHeader(syn=True, seqno=1000), payload=b"hello")
wire = seg.serialize(0).concatenate()

again = TCPSegment.parse(wire, 0)
assert again.header.syn and bytes(again.payload) == b"hello"
assert again.length_in_sequence_space() == 6
```

Compute an Internet checksum:

```python
from spongenet.util import InternetChecksum

check = InternetChecksum()
check.add(b"\x45\x00\x00\x1c")
print(hex(check.value()))
```

## What it does not do

The package does not contain a TCP sender, a TCP receiver, a TCP connection state machine or a byte stream. `TCPState.from_endpoints` therefore works only with sender and receiver objects that you provide.

The package also lacks the following:

- a socket object that runs a whole TCP connection
- an adapter for Ethernet frames on a TAP device
- an ARP-resolving network interface
- a command-line program

The adapters only turn segments into datagrams and back, and filter what they receive.