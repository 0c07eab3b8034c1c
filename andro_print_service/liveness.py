"""
Liveness Probe
==============

Best-effort TCP reachability check. A successful handshake means online;
refusal, unreachable host and timeout all mean offline. The result is
valid only at the instant of the probe and is never cached.
"""

import logging
import socket
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

from .config import PROBE_TIMEOUT

logger = logging.getLogger(__name__)


def probe(ip: str, port: int, timeout: float = PROBE_TIMEOUT) -> bool:
    """
    Check whether ``ip:port`` accepts a TCP connection.

    Hostnames are resolved once and only the first address is tried, so a
    probe makes a single connection attempt bounded by ``timeout``.
    Never raises. The socket is closed before returning.
    """
    try:
        port = int(port)
        if not 0 < port < 65536:
            raise ValueError(f'port out of range: {port}')
        family, socktype, proto, _, address = socket.getaddrinfo(
            ip, port, type=socket.SOCK_STREAM)[0]
        with socket.socket(family, socktype, proto) as sock:
            sock.settimeout(timeout)
            sock.connect(address)
            return True
    except (OSError, ValueError, OverflowError) as e:
        logger.debug(f"Probe {ip}:{port} failed: {e}")
        return False


def probe_many(endpoints: List[Tuple[str, int]], timeout: float = PROBE_TIMEOUT) -> List[bool]:
    """
    Probe all endpoints in parallel.

    Returns:
        One result per endpoint, in the order given
    """
    if not endpoints:
        return []

    with ThreadPoolExecutor(max_workers=min(len(endpoints), 16),
                            thread_name_prefix='probe') as pool:
        return list(pool.map(lambda ep: probe(ep[0], ep[1], timeout), endpoints))
