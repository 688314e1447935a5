"""A small threaded HTTP server with routing, response builders, users and sessions."""

__version__ = "0.1.0"
__all__ = ["httpd", "response", "session", "user"]