"""Shared fixtures"""
import socket
import struct
import threading
import pytest


ZBX_HEADER_SIZE = 13


def _recv_exactly(conn, size):
    data = b""
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


@pytest.fixture
def zabbix_peer():
    """Start a one-shot trapper peer that answers with the given raw body.

    Returns the port it listens on, on 127.0.0.1.
    """
    listeners = []

    def start(body: bytes) -> int:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        listener.settimeout(10)
        listeners.append(listener)

        def reply():
            conn, _ = listener.accept()
            with conn:
                header = _recv_exactly(conn, ZBX_HEADER_SIZE)
                length = struct.unpack("<I", header[5:9])[0]
                _recv_exactly(conn, length)
                conn.sendall(b"ZBXD\x01" + struct.pack("<II", len(body), 0) + body)

        threading.Thread(target=reply, daemon=True).start()
        return listener.getsockname()[1]

    yield start

    for listener in listeners:
        listener.close()
