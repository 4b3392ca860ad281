"""
Storefront Backend — Application Package Initializer
====================================================

What: Marks the `storefront` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Query translation, order totals
    ├─────────────────────────────────────┤
    │   Schemas, Filters & Identifiers    │  ← Pydantic contracts, filter trees
    ├─────────────────────────────────────┤
    │      Document Store (Persistence)   │  ← One SQLite file per collection
    └─────────────────────────────────────┘

    Services receive their store handles explicitly, so every layer below
    the routes can be exercised against temporary files in tests.
"""

__version__ = "1.0.0"
