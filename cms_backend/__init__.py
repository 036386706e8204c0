"""Backend pieces for the mdcms document manager.

This package keeps the FastAPI route handlers in server.py thin:
- document storage in a single directory, with path traversal protection
- markdown rendering
- YAML + bcrypt credential checks
- signed-cookie session helpers (username + one-shot flash message)
- Jinja2 view rendering

Security note:
Document names come straight from the URL. Every filesystem access goes through
DocumentStore._path, so a name can never resolve outside the storage directory.
"""
