# Middleware package init
"""
FitTrack Backend — Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    Request ID runs first so the access log line, and any log line written
    by the stores during the request, carry the correlation ID.
"""
