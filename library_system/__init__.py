"""Library System - Core Application Package

This package contains the core application modules including:
- Entities (book.py, member.py, loan.py)
- Library catalog and loan workflow (library.py)
- HTTP API (api.py) and its client (http_client.py)
- CLI interface (main.py, ui_helpers.py)
- Settings (config.py)
"""

__version__ = "1.0.0"
