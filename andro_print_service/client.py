"""
AndroPrint Service Client
=========================

Python SDK for interacting with AndroPrint Service.

Usage:
    from andro_print_service.client import PrintClient

    client = PrintClient('http://localhost:3000', client_id='clt-1a2b3c', pin='123456')

    # List printers
    printers = client.list_printers()

    # Print text
    client.print_text('CASH-1', 'Hello')

    # Print an uploaded image
    client.print_image('CASH-1', 'logo.png')
"""

import requests
from typing import Dict, Any, Optional, List


class PrintClient:
    """Client for AndroPrint Service."""

    def __init__(self, base_url: str = 'http://localhost:3000', client_id: str = None,
                 pin: str = None, admin_key: str = None, timeout: float = 30):
        """
        Initialize client.

        Args:
            base_url: Base URL of the print service
            client_id: Registered client id (x-client-id)
            pin: Client pin (x-print-key)
            admin_key: Bearer key for client management, if the server sets one
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.client_id = client_id
        self.pin = pin
        self.admin_key = admin_key
        self.timeout = timeout

    def _headers(self, printer_id: Optional[str] = None) -> Dict[str, str]:
        """Get request headers."""
        headers = {'Content-Type': 'application/json'}
        if self.client_id and self.pin:
            headers['x-client-id'] = self.client_id
            headers['x-print-key'] = self.pin
        if self.admin_key:
            headers['Authorization'] = f'Bearer {self.admin_key}'
        if printer_id:
            headers['x-printer-id'] = printer_id
        return headers

    def _request(self, method: str, endpoint: str, data: Dict = None,
                 printer_id: Optional[str] = None) -> Dict[str, Any]:
        """Make API request."""
        url = f'{self.base_url}{endpoint}'

        try:
            response = requests.request(method, url, json=data,
                                        headers=self._headers(printer_id),
                                        timeout=self.timeout)
        except requests.exceptions.Timeout:
            return {'success': False, 'error': 'Request timeout'}
        except requests.exceptions.ConnectionError:
            return {'success': False, 'error': f'Cannot connect to {self.base_url}'}

        try:
            return response.json()
        except ValueError:
            return {'success': False, 'error': f'HTTP {response.status_code}: {response.text[:200]}'}

    # =========================================================================
    # Health
    # =========================================================================

    def health(self) -> Dict[str, Any]:
        """Check service health."""
        return self._request('GET', '/health')

    def is_online(self) -> bool:
        """Check if service is online."""
        return self.health().get('status') == 'online'

    def server_info(self) -> Dict[str, Any]:
        """Server id, auth flag, default printer and port."""
        return self._request('GET', '/api/server')

    # =========================================================================
    # Printers
    # =========================================================================

    def list_printers(self) -> List[Dict[str, Any]]:
        """List all printers with their ``online`` flag."""
        return self._request('GET', '/api/printers').get('printers', [])

    def save_printer(self, printer_id: str, name: str, role: str, ip: str,
                     port: int = 9100, enabled: bool = True) -> Dict[str, Any]:
        """Create or replace a printer."""
        data = {
            'id': printer_id,
            'name': name,
            'role': role,
            'connection': {'ip': ip, 'port': port},
            'enabled': enabled,
        }
        return self._request('POST', '/api/printer/save', data)

    def delete_printer(self, printer_id: str) -> Dict[str, Any]:
        """Delete a printer."""
        return self._request('POST', '/api/printer/delete', {'id': printer_id})

    def test_printer(self, printer_id: str) -> Dict[str, Any]:
        """Print a test page."""
        return self._request('POST', '/api/printer/test', {'printerId': printer_id})

    # =========================================================================
    # Printing
    # =========================================================================

    def print_text(self, printer_id: str, text: str) -> Dict[str, Any]:
        """Print a block of text followed by a cut."""
        return self._request('POST', '/print', {'text': text}, printer_id=printer_id)

    def print_invoice(self, printer_id: str, company: Dict[str, Any], master: Dict[str, Any],
                      lines: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Print an invoice.

        Args:
            printer_id: Target printer ID
            company: ``name`` plus optional ``address``, ``phone``, ``taxId``
            master: ``billNo``, ``date``, ``time``, ``partyName``, ``netAmount``
            lines: Items with ``itemName``, ``qty``, ``total``
        """
        data = {'company': company, 'master': master, 'lines': lines}
        return self._request('POST', '/print', data, printer_id=printer_id)

    def print_image(self, printer_id: str, file_ref: str) -> Dict[str, Any]:
        """Print an image already stored in the server's upload directory."""
        return self._request('POST', '/img', {'file': file_ref}, printer_id=printer_id)

    def print_document(self, printer_id: str, file_ref: str, convert: bool = True) -> Dict[str, Any]:
        """Print a stored PDF, rasterized (default) or passed through unmodified."""
        endpoint = '/pdftoimg' if convert else '/pdfdirect'
        return self._request('POST', endpoint, {'file': file_ref}, printer_id=printer_id)

    # =========================================================================
    # Clients
    # =========================================================================

    def list_clients(self) -> List[Dict[str, Any]]:
        """List registered clients (without pins)."""
        return self._request('GET', '/api/clients').get('clients', [])

    def create_client(self) -> Dict[str, Any]:
        """Register a new client. The returned pin cannot be retrieved later."""
        return self._request('POST', '/api/client/create')
