"""
FitTrack Backend — Application Package
========================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (validator + stores)      │  ← Domain rules, transactions
    ├─────────────────────────────────────┤
    │  Domain / Schemas / ORM Models      │  ← Values, JSON contract, tables
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy engine
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
