"""Book Catalogue - Core Application Package

This package contains the core application modules including:
- Data model and wire date format (book.py)
- Concurrent in-memory book store (store.py)
- HTTP API endpoints (api.py)
- Client-side list state and row lifecycle (client_state.py, edit_session.py)
- CLI interface (main.py)
"""
