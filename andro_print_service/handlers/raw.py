"""
Raw ESC/POS Handler
===================

Encodes commands as ESC/POS control sequences and writes them to the
printer over a plain TCP socket (port 9100 style).
"""

import socket
import struct
from typing import Dict, Any, List

from PIL import ImageOps

from .base import BaseHandler
from ..commands import Line, Row, Rule, Image, Raw, Cut, format_row
from ..exceptions import TransportFailureError


class RawSocketHandler(BaseHandler):
    """Handler for printers that accept ESC/POS bytes directly."""

    # ESC/POS commands
    INIT = b'\x1b\x40'  # Initialize printer
    CUT = b'\x1d\x56\x00'  # Full cut
    FEED = b'\x1b\x64'  # Feed lines

    # Text formatting
    BOLD_ON = b'\x1b\x45\x01'
    BOLD_OFF = b'\x1b\x45\x00'

    # Alignment
    ALIGN = {
        'left': b'\x1b\x61\x00',
        'center': b'\x1b\x61\x01',
        'right': b'\x1b\x61\x02',
    }

    def encode(self, commands: List) -> bytes:
        """Encode commands into one ESC/POS byte stream."""
        data = bytearray(self.INIT)

        for command in commands:
            if isinstance(command, Line):
                data.extend(self._text(command.text, command.align, command.bold))
            elif isinstance(command, Row):
                data.extend(self._text(format_row(command, self.line_width)))
            elif isinstance(command, Rule):
                data.extend(self._text(command.char * self.line_width))
            elif isinstance(command, Image):
                data.extend(self.ALIGN['center'])
                data.extend(self._raster(command.image))
                data.extend(self.ALIGN['left'])
            elif isinstance(command, Raw):
                data.extend(command.data)
            elif isinstance(command, Cut):
                data.extend(self.FEED + b'\x03')  # Feed 3 lines
                data.extend(self.CUT)
            else:
                raise TypeError(f'Unsupported command: {command!r}')

        return bytes(data)

    def _text(self, text: str, align: str = 'left', bold: bool = False) -> bytes:
        data = bytearray()
        data.extend(self.ALIGN.get(align, self.ALIGN['left']))
        if bold:
            data.extend(self.BOLD_ON)
        data.extend(text.encode('utf-8', errors='replace'))
        data.extend(b'\n')
        if bold:
            data.extend(self.BOLD_OFF)
        return bytes(data)

    def _raster(self, img) -> bytes:
        """GS v 0 raster of a PIL image; dark pixels print."""
        width, height = img.size
        bytes_per_row = (width + 7) // 8

        # Mode '1' packs white as 1; invert so set bits are dots
        bits = ImageOps.invert(img.convert('L')).convert('1').tobytes()

        header = b'\x1d\x76\x30\x00' + struct.pack('<HH', bytes_per_row, height)
        return header + bits

    def send(self, commands: List) -> Dict[str, Any]:
        """Write the encoded job, then half-close so the cut is the last write."""
        data = self.encode(commands)
        host, port = self.printer.ip, self.printer.port

        try:
            with socket.create_connection((host, port), timeout=self.timeout) as sock:
                sock.sendall(data)
                sock.shutdown(socket.SHUT_WR)
        except socket.timeout:
            raise TransportFailureError(f'Connection timeout to {host}:{port}', self.printer.id)
        except ConnectionRefusedError:
            raise TransportFailureError(f'Connection refused by {host}:{port}', self.printer.id)
        except OSError as e:
            raise TransportFailureError(str(e) or f'Socket error talking to {host}:{port}',
                                        self.printer.id)

        return {
            'host': host,
            'port': port,
            'bytes_sent': len(data),
        }
