"""
Backend package: Flask HTTP API over the secrets file.
"""

from .app import create_app

__all__ = ['create_app']
