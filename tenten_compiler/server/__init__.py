"""HTTP API for the compiler (FastAPI app in app.py, schemas in models.py)."""
