"""
Client Model
============

A registered client device allowed to submit print jobs.
"""

import secrets
from datetime import datetime
from dataclasses import dataclass, field, asdict
from typing import Dict, Any

from .printer import to_flag
from ..exceptions import PayloadInvalidError


def _new_client_id() -> str:
    return f"clt-{secrets.token_hex(3)}"


def _new_pin() -> str:
    return str(100000 + secrets.randbelow(900000))


@dataclass
class ClientRecord:
    """Client credentials. ``id`` and ``pin`` are always minted server-side."""

    id: str = field(default_factory=_new_client_id)
    pin: str = field(default_factory=_new_pin)
    role: str = "CLIENT"
    enabled: bool = True
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data['createdAt'] = data.pop('created_at').isoformat()
        return data

    def to_public_dict(self) -> Dict[str, Any]:
        """Same as ``to_dict`` without the pin."""
        data = self.to_dict()
        data.pop('pin')
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClientRecord':
        """
        Create from a stored dictionary.

        Raises:
            PayloadInvalidError: not an object, or id/pin missing
        """
        if not isinstance(data, dict):
            raise PayloadInvalidError('Client record must be an object')
        for key in ('id', 'pin'):
            if data.get(key) in (None, ''):
                raise PayloadInvalidError(f'Client {key} required')

        created_at = data.get('createdAt')
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=str(data['id']),
            pin=str(data['pin']),
            role=data.get('role', 'CLIENT'),
            enabled=to_flag(data.get('enabled')),
            created_at=created_at or datetime.now(),
        )
