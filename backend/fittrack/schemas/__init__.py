# Schemas package init
"""
FitTrack Backend — Pydantic Request/Response Schemas
======================================================

Schemas are separate from the domain types and the ORM models because the
JSON contract (flat measurement fields, no password hashes) changes
independently of both.
"""
