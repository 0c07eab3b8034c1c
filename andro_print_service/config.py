"""
AndroPrint Service Configuration
"""

import os

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# Server Configuration
# =============================================================================

PORT = int(os.environ.get('PORT', 3000))
HOST = os.environ.get('ANDROPRINT_HOST', '0.0.0.0')
DEBUG = os.environ.get('ANDROPRINT_DEBUG', 'false').lower() == 'true'

# Client authentication (x-client-id / x-print-key headers)
ENABLE_AUTH = os.environ.get('ENABLE_AUTH', 'false').lower() == 'true'

# Optional bearer key for client registration/listing (unset = open)
ADMIN_API_KEY = os.environ.get('ANDROPRINT_ADMIN_KEY') or None

# =============================================================================
# Printer Defaults
# =============================================================================

# Liveness probe timeout (seconds)
PROBE_TIMEOUT = float(os.environ.get('ANDROPRINT_PROBE_TIMEOUT', 1.5))

# Device-side timeout for a print job (seconds)
PRINT_TIMEOUT = float(os.environ.get('ANDROPRINT_PRINT_TIMEOUT', 5))

# Probe every printer before dispatching a job to it
PROBE_BEFORE_PRINT = os.environ.get('ANDROPRINT_PROBE_BEFORE_PRINT', 'true').lower() == 'true'

# 'raw' = ESC/POS bytes over a plain socket, 'escpos' = python-escpos adapter
PRINT_TRANSPORT = os.environ.get('ANDROPRINT_TRANSPORT', 'escpos')

# Maximum enabled printers sharing a role
MAX_PRINTERS_PER_ROLE = 3

# Raw socket printer default port
DEFAULT_PRINTER_PORT = 9100

# Printer used by /print when the request does not name one
DEFAULT_PRINTER = os.environ.get('DEFAULT_PRINTER') or None

# =============================================================================
# Receipt Layout
# =============================================================================

LINE_WIDTH = int(os.environ.get('ANDROPRINT_LINE_WIDTH', 48))  # 80mm, font A
PAPER_WIDTH_DOTS = int(os.environ.get('ANDROPRINT_PAPER_WIDTH', 576))  # 80mm @ 203dpi
ITEM_NAME_MAX = 18

# =============================================================================
# Storage Configuration
# =============================================================================

DATA_DIR = os.environ.get('ANDROPRINT_DATA_DIR', os.path.expanduser('~/.andro_print_service'))
UPLOAD_DIR = os.environ.get('ANDROPRINT_UPLOAD_DIR', os.path.join(DATA_DIR, 'uploads'))

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.environ.get('ANDROPRINT_LOG_LEVEL', 'INFO').upper()
LOG_DIR = os.environ.get('ANDROPRINT_LOG_DIR') or None
