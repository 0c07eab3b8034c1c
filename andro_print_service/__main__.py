"""
Entry point: python -m andro_print_service
"""

from .app import create_app
from .config import HOST, PORT, DEBUG, DATA_DIR, LOG_LEVEL, LOG_DIR
from .logging_config import setup_logging
from . import __version__


def main():
    """Run the service."""
    setup_logging(LOG_LEVEL, LOG_DIR)
    app = create_app()

    print("=" * 60)
    print("  AndroPrint Service")
    print("=" * 60)
    print(f"  Version  : {__version__}")
    print(f"  Local URL: http://localhost:{PORT}")
    print(f"  Server ID: {app.config['SERVER_ID']}")
    print(f"  Auth     : {'ENABLED' if app.config['ENABLE_AUTH'] else 'DISABLED'}")
    print(f"  Transport: {app.config['PRINT_TRANSPORT']}")
    print(f"  Data     : {DATA_DIR}")
    print(f"  Printers : {len(app.config['PRINTER_REGISTRY'].list())} registered")
    print("=" * 60)

    app.run(host=HOST, port=PORT, debug=DEBUG)


if __name__ == '__main__':
    main()
