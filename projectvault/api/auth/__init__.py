"""
Auth API package.

Contains the passcode login routes for the project vault.
"""

from projectvault.api.auth.routes import router

__all__ = ["router"]
