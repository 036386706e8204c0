"""
Deployment entrypoint.
Builds the FastAPI app from environment settings so uvicorn can find it as main:app
"""

from cms_backend.config import load_settings
from server import create_app

app = create_app(load_settings())

__all__ = ["app"]
