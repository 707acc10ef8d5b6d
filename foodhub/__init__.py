"""
FoodHub Backend - Application Package Initializer
==================================================

What: Marks the `foodhub` directory as a Python package.
Who:  Imported by uvicorn (`foodhub.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is a layered order-management API:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, role gating
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← order builder, status machine,
    │                                     │    review eligibility gate
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes resolve the principal and validate request shape; services receive
    an explicit session handle and enforce the domain invariants.
"""

__version__ = "1.0.0"
