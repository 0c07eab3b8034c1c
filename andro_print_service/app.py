"""
AndroPrint Service - Main Application
=====================================

Flask app factory and HTTP routes.

Run: python -m andro_print_service
"""

import sys
import logging
import socket
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, Blueprint, request, jsonify, current_app, g
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from . import __version__
from . import config as default_config
from .auth import AuthGate, auth_required, admin_required
from .dispatcher import PrintDispatcher
from .exceptions import PrintServiceError, PayloadInvalidError
from .handlers import get_handler
from .identity import load_or_create_server_id
from .liveness import probe_many
from .models import PrinterRecord, TextJob, classify_job, image_job, document_job
from .storage import JsonFileStorage, PrinterRegistry, ClientStore

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__)


# =============================================================================
# Application Setup
# =============================================================================

def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Build the Flask app and its services.

    Args:
        overrides: Config values replacing those from ``config.py``.
            ``PRINTER_STORAGE`` / ``CLIENT_STORAGE`` may supply storage
            backends; by default JSON files under ``DATA_DIR`` are used.
    """
    app = Flask(__name__)
    app.config.from_object(default_config)
    app.config.update(overrides or {})
    CORS(app)

    data_dir = Path(app.config['DATA_DIR'])

    printer_storage = app.config.get('PRINTER_STORAGE') or \
        JsonFileStorage(data_dir / 'printer.json', 'printers')
    client_storage = app.config.get('CLIENT_STORAGE') or \
        JsonFileStorage(data_dir / 'clients.json', 'clients')

    handler_class = get_handler(app.config['PRINT_TRANSPORT'])
    if handler_class is None:
        raise ValueError(f"Unknown PRINT_TRANSPORT: {app.config['PRINT_TRANSPORT']!r}")

    registry = PrinterRegistry(printer_storage, app.config['MAX_PRINTERS_PER_ROLE'])
    clients = ClientStore(client_storage)

    app.config['SERVER_ID'] = load_or_create_server_id(data_dir / 'server.id')
    app.config['PRINTER_REGISTRY'] = registry
    app.config['CLIENT_STORE'] = clients
    app.config['AUTH_GATE'] = AuthGate(clients, enabled=app.config['ENABLE_AUTH'])
    app.config['DISPATCHER'] = PrintDispatcher(
        registry,
        handler_class,
        probe_before_print=app.config['PROBE_BEFORE_PRINT'],
        probe_timeout=app.config['PROBE_TIMEOUT'],
        print_timeout=app.config['PRINT_TIMEOUT'],
        line_width=app.config['LINE_WIDTH'],
        paper_width=app.config['PAPER_WIDTH_DOTS'],
    )

    app.register_blueprint(api)
    app.register_error_handler(PrintServiceError, _handle_service_error)
    app.register_error_handler(HTTPException, _handle_http_error)
    app.register_error_handler(Exception, _handle_unexpected_error)

    return app


def _handle_service_error(e: PrintServiceError):
    return jsonify(e.to_dict()), e.status_code


def _handle_http_error(e: HTTPException):
    return jsonify({'success': False, 'reason': 'http_error', 'error': e.description}), e.code


def _handle_unexpected_error(e: Exception):
    logger.error(f"Unhandled error on {request.path}: {e}", exc_info=True)
    return jsonify({'success': False, 'reason': 'internal_error', 'error': str(e)}), 500


def _registry() -> PrinterRegistry:
    return current_app.config['PRINTER_REGISTRY']


def _dispatcher() -> PrintDispatcher:
    return current_app.config['DISPATCHER']


def _printer_id(data: Dict[str, Any]) -> str:
    """Target printer from header, body, or the configured default."""
    printer_id = (request.headers.get('x-printer-id')
                  or data.get('printerId')
                  or current_app.config.get('DEFAULT_PRINTER'))
    if not printer_id:
        raise PayloadInvalidError('printerId missing')
    return str(printer_id)


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@api.route('/', methods=['GET'])
def index():
    return 'AndroPrint Server Running'


@api.route('/api', methods=['GET'])
def api_info():
    """API info (JSON)."""
    return jsonify({
        'service': 'AndroPrint Service',
        'version': __version__,
        'status': 'running',
        'endpoints': {
            'health': '/health',
            'server': '/api/server',
            'printers': '/api/printers',
            'clients': '/api/clients',
            'print': ['/print', '/img', '/pdftoimg', '/pdfdirect'],
        }
    })


@api.route('/health', methods=['GET'])
def health():
    """Health check with system info."""
    return jsonify({
        'status': 'online',
        'version': __version__,
        'serverId': current_app.config['SERVER_ID'],
        'hostname': socket.gethostname(),
        'python': sys.version.split()[0],
        'printers_registered': len(_registry().list()),
        'timestamp': datetime.now().isoformat(),
    })


@api.route('/api/server', methods=['GET'])
def server_info():
    return jsonify({
        'serverId': current_app.config['SERVER_ID'],
        'auth': current_app.config['AUTH_GATE'].enabled,
        'defaultPrinter': current_app.config.get('DEFAULT_PRINTER'),
        'port': current_app.config['PORT'],
    })


# =============================================================================
# Client Management API
# =============================================================================

@api.route('/api/clients', methods=['GET'])
@admin_required
def list_clients():
    """List registered clients (pins are never returned here)."""
    clients = current_app.config['CLIENT_STORE'].list()
    return jsonify({
        'success': True,
        'clients': [c.to_public_dict() for c in clients],
        'count': len(clients),
    })


@api.route('/api/client/create', methods=['POST'])
@admin_required
def create_client():
    """Register a client. The pin is only ever returned by this call."""
    client = current_app.config['CLIENT_STORE'].register()
    return jsonify({'success': True, **client.to_dict()})


# =============================================================================
# Printer Management API
# =============================================================================

@api.route('/api/printers', methods=['GET'])
def list_printers():
    """List all printers, each with a live ``online`` flag."""
    printers = _registry().list()
    online = probe_many([(p.ip, p.port) for p in printers],
                        timeout=current_app.config['PROBE_TIMEOUT'])

    printers_data = []
    for printer, is_online in zip(printers, online):
        printer_dict = printer.to_dict()
        printer_dict['online'] = is_online
        printers_data.append(printer_dict)

    return jsonify({
        'success': True,
        'printers': printers_data,
        'count': len(printers_data),
    })


@api.route('/api/printer/save', methods=['POST'])
@auth_required
def save_printer():
    """Create or replace a printer."""
    record = PrinterRecord.from_dict(request.get_json(silent=True))
    _registry().save(record)
    return jsonify({'success': True, 'printer': record.to_dict()})


@api.route('/api/printer/delete', methods=['POST'])
@auth_required
def delete_printer():
    """Delete a printer. Unknown ids still succeed."""
    printer_id = _json_body().get('id')
    if printer_id:
        _registry().delete(str(printer_id))
    return jsonify({'success': True})


@api.route('/api/printer/test', methods=['POST'])
@auth_required
def test_printer():
    """Print a fixed test page."""
    data = _json_body()
    printer = _dispatcher().resolve(data.get('printerId') or data.get('id'))

    text = '\n'.join([
        '==== ANDROPRINT TEST ====',
        f'Printer: {printer.name}',
        f"Server : {current_app.config['SERVER_ID']}",
        datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
    ])
    receipt = _dispatcher().dispatch(printer.id, TextJob(text=text), g.client)

    return jsonify({**receipt.to_dict(), 'printed': True})


# =============================================================================
# Print APIs
# =============================================================================

@api.route('/print', methods=['POST'])
@auth_required
def print_job():
    """Print text or an invoice, depending on the body shape."""
    data = request.get_json(silent=True)
    job = classify_job(data)

    receipt = _dispatcher().dispatch(_printer_id(data), job, g.client)
    return jsonify({**receipt.to_dict(), 'message': 'Printed successfully'})


@api.route('/img', methods=['POST'])
@auth_required
def print_image():
    """Print a previously uploaded image."""
    data = _json_body()
    job = image_job(data, current_app.config['UPLOAD_DIR'])
    receipt = _dispatcher().dispatch(_printer_id(data), job, g.client)
    return jsonify(receipt.to_dict())


@api.route('/pdftoimg', methods=['POST'])
@auth_required
def print_pdf_as_image():
    """Rasterize an uploaded PDF and print every page."""
    data = _json_body()
    job = document_job(data, current_app.config['UPLOAD_DIR'], convert=True)
    receipt = _dispatcher().dispatch(_printer_id(data), job, g.client)
    return jsonify(receipt.to_dict())


@api.route('/pdfdirect', methods=['POST'])
@auth_required
def print_pdf_direct():
    """Send an uploaded document to the printer unmodified."""
    data = _json_body()
    job = document_job(data, current_app.config['UPLOAD_DIR'], convert=False)
    receipt = _dispatcher().dispatch(_printer_id(data), job, g.client)
    return jsonify(receipt.to_dict())
