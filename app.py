"""
App assembly entry point.

Exposes a FastAPI `app` whose blueprint store is built from environment
configuration at startup (`uvicorn app:app`).
"""

from blueprint_service.api.main import create_app

app = create_app()
