import socket
import threading
import time
from typing import Callable, List


def wait_for(
        condition: Callable[[], bool],
        timeout: float = 5.0,
        interval: float = 0.05,
):
    """
    Wait until condition() returns True or timeout is reached.

    Raises AssertionError on timeout.
    """
    deadline = time.time() + timeout

    while time.time() < deadline:
        if condition():
            return
        time.sleep(interval)

    raise AssertionError("Condition not met before timeout")


def closed_port() -> int:
    """A local port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


class TcpSink:
    """
    Local TCP endpoint standing in for a printer.

    Every accepted connection is read until the peer half-closes; the bytes
    of each connection are appended to ``received``.
    """

    def __init__(self):
        self.server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.server.bind(('127.0.0.1', 0))
        self.server.listen(16)
        self.server.settimeout(0.1)
        self.host = '127.0.0.1'
        self.port = self.server.getsockname()[1]
        self.received: List[bytes] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def payloads(self) -> List[bytes]:
        """Non-empty connections (probes connect and close without data)."""
        with self._lock:
            return [data for data in self.received if data]

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self.server.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            threading.Thread(target=self._read, args=(conn,), daemon=True).start()

    def _read(self, conn):
        chunks = []
        conn.settimeout(5)
        with conn:
            try:
                while True:
                    chunk = conn.recv(65536)
                    if not chunk:
                        break
                    chunks.append(chunk)
            except OSError:
                pass
        with self._lock:
            self.received.append(b''.join(chunks))

    def __enter__(self):
        self._thread.start()
        return self

    def __exit__(self, *exc):
        self._stop.set()
        self._thread.join(timeout=2)
        self.server.close()


def printer_payload(printer_id='CASH-1', role='CASHIER', port=9100, ip='127.0.0.1',
                    enabled=True, name=None):
    return {
        'id': printer_id,
        'name': name or f'Printer {printer_id}',
        'role': role,
        'connection': {'ip': ip, 'port': port},
        'enabled': enabled,
    }
