"""
SeaFood Delivery Backend — Middleware Package
==============================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line can carry the correlation id
    2. Logging: one access line per request with status and duration
"""
