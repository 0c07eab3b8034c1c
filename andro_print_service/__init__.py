"""
AndroPrint Service
==================

Print server for a small fleet of network thermal receipt printers.

Supports:
- Printer registry with per-role quota (max 3 enabled printers per role)
- Client devices authenticated by id + pin
- TCP liveness checks
- Text, invoice, image and PDF jobs over raw ESC/POS or python-escpos

Usage:
    python -m andro_print_service

API Endpoints:
    GET  /api/printers          - List printers with online status
    POST /api/printer/save      - Create or replace a printer
    POST /api/printer/delete    - Delete a printer
    POST /api/printer/test      - Print a test page
    POST /print                 - Print text or an invoice
    POST /img, /pdftoimg        - Print an uploaded image / PDF
    POST /pdfdirect             - Send an uploaded PDF unmodified
    GET  /api/clients           - List clients
    POST /api/client/create     - Register a client
"""

__version__ = '1.0.0'
__author__ = 'AndroPrint'
