"""
main.py — Convenience entry point for the scouting portal backend.

The FastAPI application is defined in api/main.py. This file re-exports
`app` so uvicorn can be started from backend/ as:

    uvicorn main:app --reload --port 8000
"""

from api.main import app  # noqa: F401  (re-export)
