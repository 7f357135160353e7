"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from contact_engine.api import app

    uvicorn contact_engine.api:app --reload
"""

from contact_engine.api.app import app

__all__ = ["app"]
