"""
Serverless entrypoint.

Vercel treats files under api/ as functions and serves the ASGI `app` found
here; the rewrite in vercel.json forwards every path to it, so the same app
handles both the API routes and the static UI.
"""

from server import app

__all__ = ["app"]
