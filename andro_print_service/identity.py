"""
Server Identity
===============

A stable server id, generated on first start and read back afterwards.
"""

import logging
import secrets
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def load_or_create_server_id(path: Union[str, Path]) -> str:
    """
    Return the id stored at ``path``, creating it when absent or empty.

    The id has the form ``srv-<8 hex chars>`` and never changes once written.
    """
    path = Path(path)
    if path.exists():
        server_id = path.read_text(encoding='utf-8').strip()
        if server_id:
            return server_id

    server_id = f"srv-{secrets.token_hex(4)}"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(server_id, encoding='utf-8')
    logger.info(f"Created server id {server_id}")
    return server_id
