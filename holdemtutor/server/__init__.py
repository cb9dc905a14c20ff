"""
HoldemTutor Server - FastAPI layer for a single UI client
"""

from holdemtutor.server.app import app, create_app

__all__ = ["app", "create_app"]
