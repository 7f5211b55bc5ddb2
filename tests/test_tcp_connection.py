import socket
import threading
from collections import deque

import pytest

from haquests.checksum import verify_checksum
from haquests.constants import TCPFlag, TCPState
from haquests.errors import ConnectionFailedError
from haquests.network import ip_to_int
from haquests.packet import IPHeader, Packet, TCPHeader
from haquests.tcp_connection import SOURCE_PORT_RANGE, TCPConnection

LOCAL_IP = "10.0.0.1"
REMOTE_IP = "10.0.0.2"
REMOTE_PORT = 80
SERVER_ISN = 5000


def make_packet(src_ip, dst_ip, src_port, dst_port, seq, ack, flags, payload=b""):
    packet = Packet()
    packet.build_ip_header(ip_to_int(src_ip), ip_to_int(dst_ip), 40 + len(payload))
    packet.set_data(payload)
    packet.build_tcp_header(src_port, dst_port, seq, ack, flags)
    return packet.serialize()


class FakeRawSocket:
    def __init__(self, answer_syn=True):
        self.sent = []
        self.incoming = deque()
        self.answer_syn = answer_syn
        self.is_open = False

    def open(self):
        self.is_open = True

    def close(self):
        self.is_open = False

    def send(self, data, dst_ip, dst_port):
        self.sent.append(bytes(data))
        ip_hdr = IPHeader.unpack(data)
        tcp_hdr = TCPHeader.unpack(data[20:])
        if self.answer_syn and tcp_hdr.flags == TCPFlag.SYN:
            self.incoming.append(
                make_packet(
                    REMOTE_IP,
                    LOCAL_IP,
                    tcp_hdr.dst_port,
                    tcp_hdr.src_port,
                    SERVER_ISN,
                    tcp_hdr.seq_num + 1,
                    TCPFlag.SYN | TCPFlag.ACK,
                )
            )
        assert ip_hdr.dst_addr == ip_to_int(dst_ip)
        return len(data)

    def receive(self, bufsize=65535):
        if not self.incoming:
            raise TimeoutError("timed out")
        return self.incoming.popleft()


def sent_tcp(raw, index):
    return TCPHeader.unpack(raw.sent[index][20:])


@pytest.fixture
def connected():
    raw = FakeRawSocket()
    conn = TCPConnection(raw_socket=raw, src_port=40000)
    conn._open_raw(LOCAL_IP, REMOTE_IP, REMOTE_PORT)
    return conn, raw


def server_data(conn, payload, seq=SERVER_ISN + 1, src_port=REMOTE_PORT):
    return make_packet(
        REMOTE_IP, LOCAL_IP, src_port, conn.src_port, seq, conn.seq_num,
        TCPFlag.PSH | TCPFlag.ACK, payload,
    )


def test_default_source_port_in_range():
    conn = TCPConnection(raw_socket=FakeRawSocket())
    low, high = SOURCE_PORT_RANGE
    assert low <= conn.src_port <= high
    assert conn.state is TCPState.CLOSED
    assert not conn.is_connected


def test_handshake_sends_syn_then_ack(connected):
    conn, raw = connected
    assert conn.state is TCPState.ESTABLISHED
    assert raw.is_open
    syn = sent_tcp(raw, 0)
    ack = sent_tcp(raw, 1)
    assert syn.flags == TCPFlag.SYN
    assert ack.flags == TCPFlag.ACK
    assert ack.seq_num == (syn.seq_num + 1) & 0xFFFFFFFF
    assert ack.ack_num == SERVER_ISN + 1
    assert conn.ack_num == SERVER_ISN + 1


def test_sent_packets_have_valid_ip_checksum(connected):
    _, raw = connected
    for packet in raw.sent:
        assert verify_checksum(packet[:20])


def test_handshake_timeout_raises():
    raw = FakeRawSocket(answer_syn=False)
    conn = TCPConnection(raw_socket=raw, src_port=40000)
    conn.handshake_timeout = 0.1
    with pytest.raises(ConnectionFailedError):
        conn._open_raw(LOCAL_IP, REMOTE_IP, REMOTE_PORT)
    assert conn.state is TCPState.SYN_SENT


def test_send_before_connect_raises():
    conn = TCPConnection(raw_socket=FakeRawSocket())
    with pytest.raises(ConnectionFailedError):
        conn.send(b"data")


def test_send_carries_payload_and_advances_sequence(connected):
    conn, raw = connected
    start = conn.seq_num
    sent = conn.send(b"abc")
    assert sent == len(raw.sent[-1])
    first = sent_tcp(raw, -1)
    assert raw.sent[-1][40:] == b"abc"
    assert first.seq_num == start
    assert first.flags == TCPFlag.PSH | TCPFlag.ACK
    conn.send(b"de")
    assert sent_tcp(raw, -1).seq_num == start + 3
    assert conn.seq_num == start + 5


def test_receive_returns_payload_and_updates_ack(connected):
    conn, raw = connected
    raw.incoming.append(server_data(conn, b"hello"))
    assert conn.receive(4096) == b"hello"
    assert conn.ack_num == SERVER_ISN + 1 + len(b"hello")


def test_receive_accumulates_packets(connected):
    conn, raw = connected
    raw.incoming.append(server_data(conn, b"ab"))
    raw.incoming.append(server_data(conn, b"cd", seq=SERVER_ISN + 3))
    assert conn.receive(4096) == b"abcd"


def test_receive_truncates_to_max_len(connected):
    conn, raw = connected
    raw.incoming.append(server_data(conn, b"0123456789"))
    assert conn.receive(4) == b"0123"


def test_receive_ignores_duplicates(connected):
    conn, raw = connected
    packet = server_data(conn, b"hello")
    raw.incoming.append(packet)
    assert conn.receive() == b"hello"
    raw.incoming.append(packet)
    assert conn.receive() == b""


def test_receive_ignores_other_ports(connected):
    conn, raw = connected
    raw.incoming.append(server_data(conn, b"noise", src_port=REMOTE_PORT + 1))
    raw.incoming.append(server_data(conn, b"mine"))
    assert conn.receive() == b"mine"


def test_close_sends_fin(connected):
    conn, raw = connected
    conn.close()
    assert sent_tcp(raw, -1).flags == TCPFlag.FIN | TCPFlag.ACK
    assert conn.state is TCPState.CLOSED
    assert not raw.is_open


def test_localhost_uses_stream_socket():
    server = socket.create_server(("127.0.0.1", 0))
    port = server.getsockname()[1]

    def echo():
        client, _ = server.accept()
        with client:
            client.sendall(client.recv(1024))

    thread = threading.Thread(target=echo)
    thread.start()
    try:
        with TCPConnection(raw_socket=FakeRawSocket()) as conn:
            conn.connect("localhost", port)
            assert conn.is_connected
            assert conn.send(b"ping") == 4
            assert conn.receive(1024) == b"ping"
        assert conn.state is TCPState.CLOSED
    finally:
        thread.join(timeout=5)
        server.close()


def test_localhost_refused_raises():
    probe = socket.create_server(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    conn = TCPConnection(raw_socket=FakeRawSocket())
    with pytest.raises(ConnectionFailedError):
        conn.connect("127.0.0.1", port)
    assert conn.state is TCPState.CLOSED