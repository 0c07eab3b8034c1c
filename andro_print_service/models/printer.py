"""
Printer Model
=============

Represents a printer in the registry.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Any

from ..config import DEFAULT_PRINTER_PORT
from ..exceptions import PayloadInvalidError


def to_flag(value: Any, default: bool = True) -> bool:
    """Parse a stored on/off flag; strings such as ``"false"`` are honoured."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'enabled')
    return bool(value)


@dataclass
class Connection:
    """Network endpoint of a printer."""

    ip: str = ""
    port: int = DEFAULT_PRINTER_PORT


@dataclass
class PrinterRecord:
    """Printer configuration as stored in the registry."""

    id: str = ""
    name: str = ""
    role: str = ""  # CASHIER, KITCHEN, ...
    connection: Connection = field(default_factory=Connection)
    enabled: bool = True

    @property
    def ip(self) -> str:
        return self.connection.ip

    @property
    def port(self) -> int:
        return self.connection.port

    def matches(self, key: str) -> bool:
        """True if ``key`` names this printer by id (case-insensitive)."""
        return self.id.lower() == key.lower()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PrinterRecord':
        """
        Create from dictionary, validating the shape.

        Raises:
            PayloadInvalidError: required field missing or malformed
        """
        if not isinstance(data, dict):
            raise PayloadInvalidError('Printer record must be an object')

        for key in ('id', 'name', 'role'):
            value = data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise PayloadInvalidError(f'Printer {key} required')

        conn = data.get('connection')
        if not isinstance(conn, dict) or not conn.get('ip'):
            raise PayloadInvalidError('Printer connection.ip required')

        try:
            port = int(conn.get('port', DEFAULT_PRINTER_PORT))
        except (TypeError, ValueError):
            raise PayloadInvalidError('Printer connection.port must be an integer')
        if not 0 < port < 65536:
            raise PayloadInvalidError('Printer connection.port out of range')

        return cls(
            id=data['id'].strip(),
            name=data['name'].strip(),
            role=data['role'].strip().upper(),
            connection=Connection(ip=str(conn['ip']).strip(), port=port),
            enabled=to_flag(data.get('enabled')),
        )
