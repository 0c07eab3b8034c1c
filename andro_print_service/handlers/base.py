"""
Base Handler
============

Abstract base class for print transports.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any

from ..commands import Cut
from ..config import PRINT_TIMEOUT, LINE_WIDTH
from ..models import PrinterRecord


class BaseHandler(ABC):
    """Transmits rendered commands to one printer."""

    def __init__(self, printer: PrinterRecord, timeout: float = PRINT_TIMEOUT,
                 line_width: int = LINE_WIDTH):
        """Initialize handler with printer configuration."""
        self.printer = printer
        self.timeout = timeout
        self.line_width = line_width

    @staticmethod
    def finalize(commands: List) -> List:
        """Commands ending in a single ``Cut``."""
        commands = list(commands)
        while commands and isinstance(commands[-1], Cut):
            commands.pop()
        commands.append(Cut())
        return commands

    def print_commands(self, commands: List) -> Dict[str, Any]:
        """
        Send commands to the printer; the cut is always written last.

        Returns:
            Dict with transport details

        Raises:
            TransportFailureError: connection or device error
        """
        return self.send(self.finalize(commands))

    @abstractmethod
    def send(self, commands: List) -> Dict[str, Any]:
        """Transmit commands that already end with ``Cut``."""
        pass
