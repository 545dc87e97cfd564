"""FastAPI admin service."""
