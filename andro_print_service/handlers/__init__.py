"""
AndroPrint Service Handlers
===========================

Print transports. One is chosen per deployment via ``PRINT_TRANSPORT``.
"""

from typing import Optional

from .base import BaseHandler
from .raw import RawSocketHandler
from .adapter import EscposAdapterHandler

__all__ = ['BaseHandler', 'RawSocketHandler', 'EscposAdapterHandler', 'get_handler']

# Handler registry
HANDLERS = {
    'raw': RawSocketHandler,
    'escpos': EscposAdapterHandler,
}


def get_handler(handler_type: str) -> Optional[type]:
    """Get handler class by type."""
    return HANDLERS.get(handler_type)
