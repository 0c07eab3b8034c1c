"""
python-escpos Handler
=====================

Drives the printer through python-escpos, which turns high-level calls
(text, alignment, bold, image, cut) into device bytes itself.
"""

from typing import Dict, Any, List, Callable, Optional

from escpos.exceptions import Error as EscposError
from escpos.printer import Network

from .base import BaseHandler
from ..commands import Line, Row, Rule, Image, Raw, Cut, format_row
from ..exceptions import TransportFailureError


class EscposAdapterHandler(BaseHandler):
    """Handler backed by ``escpos.printer.Network``."""

    def __init__(self, printer, printer_factory: Optional[Callable] = None, **kwargs):
        super().__init__(printer, **kwargs)
        self.printer_factory = printer_factory or self._network

    def _network(self):
        return Network(self.printer.ip, port=self.printer.port, timeout=self.timeout)

    def apply(self, device, commands: List) -> None:
        """Replay commands on a python-escpos device."""
        for command in commands:
            if isinstance(command, Line):
                device.set(align=command.align, bold=command.bold)
                device.text(f"{command.text}\n")
            elif isinstance(command, Row):
                device.set(align='left', bold=False)
                device.text(f"{format_row(command, self.line_width)}\n")
            elif isinstance(command, Rule):
                device.set(align='left', bold=False)
                device.text(f"{command.char * self.line_width}\n")
            elif isinstance(command, Image):
                device.image(command.image, center=True)
            elif isinstance(command, Raw):
                device._raw(command.data)
            elif isinstance(command, Cut):
                device.cut()
            else:
                raise TypeError(f'Unsupported command: {command!r}')

    def send(self, commands: List) -> Dict[str, Any]:
        host, port = self.printer.ip, self.printer.port
        device = None

        try:
            device = self.printer_factory()
            self.apply(device, commands)
        except (OSError, EscposError) as e:
            raise TransportFailureError(str(e) or f'Printer error at {host}:{port}',
                                        self.printer.id)
        finally:
            if device is not None:
                try:
                    device.close()
                except (OSError, EscposError):
                    pass

        return {
            'host': host,
            'port': port,
            'method': 'escpos',
        }
