"""
AndroPrint Service Exceptions
=============================

Exception Hierarchy:
    PrintServiceError (base)
    ├── UnauthorizedError      - credentials missing from the request
    ├── ForbiddenError         - credentials unknown, disabled or wrong
    ├── NotFoundError          - unknown printer/client id
    │   └── PrinterNotFoundError
    ├── QuotaExceededError     - role capacity reached
    ├── PayloadInvalidError    - job or record shape not recognized
    └── DispatchError
        ├── PrinterOfflineError    - liveness probe says unreachable
        └── TransportFailureError  - connection/device error while printing

Every error carries a machine-stable ``reason`` and the HTTP status the
request boundary answers with.
"""

from typing import Optional, Dict, Any


class PrintServiceError(Exception):
    """Base exception for all AndroPrint errors."""

    reason = 'error'
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Response body for the request boundary."""
        return {
            'success': False,
            'reason': self.reason,
            'error': self.message,
        }


# =============================================================================
# Authentication
# =============================================================================

class UnauthorizedError(PrintServiceError):
    """Client id or print key missing from the request."""

    reason = 'unauthorized'
    status_code = 401

    def __init__(self, message: str = 'Client ID / Print Key missing'):
        super().__init__(message)


class ForbiddenError(PrintServiceError):
    """Credentials present but not accepted."""

    reason = 'forbidden'
    status_code = 403

    def __init__(self, message: str = 'Client not allowed'):
        super().__init__(message)


# =============================================================================
# Registry
# =============================================================================

class NotFoundError(PrintServiceError):
    reason = 'not_found'
    status_code = 404


class PrinterNotFoundError(NotFoundError):

    def __init__(self, printer_id: Optional[str]):
        super().__init__('Printer not found or disabled', {'printer_id': printer_id})
        self.printer_id = printer_id


class QuotaExceededError(PrintServiceError):
    """Saving a new printer would exceed the per-role limit."""

    reason = 'quota_exceeded'
    status_code = 400

    def __init__(self, role: str, limit: int):
        super().__init__(f'Max {limit} printers reached', {'role': role, 'limit': limit})
        self.role = role
        self.limit = limit


class PayloadInvalidError(PrintServiceError):
    reason = 'payload_invalid'
    status_code = 400


# =============================================================================
# Dispatch
# =============================================================================

class DispatchError(PrintServiceError):
    """Base class for failures after a printer has been resolved."""

    def __init__(self, message: str, printer_id: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        if printer_id:
            error_details['printer_id'] = printer_id
        super().__init__(message, error_details)
        self.printer_id = printer_id


class PrinterOfflineError(DispatchError):
    reason = 'offline'

    def __init__(self, printer_id: str, host: str, port: int):
        super().__init__('Printer offline', printer_id, {'host': host, 'port': port})


class TransportFailureError(DispatchError):
    """Connection or device protocol error while transmitting a job."""

    reason = 'transport_failure'
