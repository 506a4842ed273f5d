"""
Todo server package.

Exposes the application factory for convenience imports
(``from todo_server import create_app``).
"""

from .main import create_app  # noqa: F401

__version__ = "0.1.0"
