#!/usr/bin/env python
"""
AndroPrint Service - Standalone Entry Point

Run directly:
    python main.py

Or with environment variables:
    PORT=3100 ENABLE_AUTH=true python main.py
"""

from andro_print_service.__main__ import main


if __name__ == '__main__':
    main()
