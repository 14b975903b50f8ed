"""
Ristorante API: Application Package
====================================

What: HTTP API behind the restaurant website (menu, reservations, page
      content, gallery images).
Who:  Imported by uvicorn (`ristorante.main:app`), Alembic and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │     Routes (HTTP, auth, shaping)    │
    ├─────────────────────────────────────┤
    │     Services (validation + SQL)     │
    ├─────────────────────────────────────┤
    │   Models & Schemas / Image stores   │
    ├─────────────────────────────────────┤
    │  Database (async SQLAlchemy pool)   │
    └─────────────────────────────────────┘

Routes never build SQL; services never see a Request object.
"""

__version__ = "1.0.0"
