"""
Auth Gate
=========

Validates ``x-client-id`` / ``x-print-key`` against the client store.
"""

import hmac
import logging
from functools import wraps
from typing import Optional

from flask import request, current_app, g

from .exceptions import UnauthorizedError, ForbiddenError
from .models import ClientRecord

logger = logging.getLogger(__name__)

CLIENT_ID_HEADER = 'x-client-id'
PRINT_KEY_HEADER = 'x-print-key'


class AuthGate:
    """Client credential check, active only when ``enabled``."""

    def __init__(self, clients, enabled: bool = False):
        self.clients = clients
        self.enabled = enabled

    def authorize(self, client_id: Optional[str], presented_key: Optional[str]) -> Optional[ClientRecord]:
        """
        Check a client's credentials.

        Returns:
            The matching client, or None when authentication is disabled

        Raises:
            UnauthorizedError: id or key missing
            ForbiddenError: unknown client, disabled client or wrong key
        """
        if not self.enabled:
            return None

        if not client_id or not presented_key:
            raise UnauthorizedError()

        client = self.clients.get(client_id)
        if (client is None or not client.enabled
                or not hmac.compare_digest(client.pin.encode(), presented_key.encode())):
            logger.warning(f"Rejected credentials for client {client_id}")
            raise ForbiddenError()

        return client


def auth_required(view):
    """Run the auth gate before ``view``; the client lands in ``g.client``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        gate = current_app.config['AUTH_GATE']
        g.client = gate.authorize(
            request.headers.get(CLIENT_ID_HEADER),
            request.headers.get(PRINT_KEY_HEADER),
        )
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    """
    Require ``ADMIN_API_KEY`` as a Bearer token when one is configured.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        api_key = current_app.config.get('ADMIN_API_KEY')
        if api_key:
            auth_header = request.headers.get('Authorization', '')
            if not auth_header.startswith('Bearer '):
                raise UnauthorizedError('Admin API key missing')
            if not hmac.compare_digest(auth_header[7:].encode(), api_key.encode()):
                raise ForbiddenError('Invalid admin API key')
        return view(*args, **kwargs)

    return wrapper
