"""Top-level portfolio_admin package.

Sub-packages
------------
portfolio_admin.api
    FastAPI admin service exposing the project store and reorder batches
portfolio_admin.cli
    click entry point for managing the portfolio from a terminal
portfolio_admin.core
    Ordered collection store, reorder coordinator, config and logging
portfolio_admin.schemas
    Pydantic models shared by every layer
portfolio_admin.services
    Client for the remote portfolio REST API
"""

from __future__ import annotations

__version__ = "0.1.0"
