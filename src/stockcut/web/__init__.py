"""FastAPI REST API for cutting plan optimization and inventory commit.

Usage:
    uvicorn stockcut.web:app --reload
"""

from stockcut.web.app import app, create_app

__all__ = ["app", "create_app"]
