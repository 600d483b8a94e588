"""
DysNote Backend — Application Package Initializer
==================================================

What: Marks the `dysnote` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs, status codes, bodies
    ├─────────────────────────────────────┤
    │     Repositories (Note lifecycle)   │  ← memory or database, same contract
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes translate repository outcomes into HTTP responses; repositories
    never see HTTP concepts. Drawings and OCR text arrive as opaque strings
    produced by the browser and are stored verbatim.
"""

__version__ = "1.0.0"
