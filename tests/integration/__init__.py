"""Integration tests for the API client working against a real ASGI app.

A scripted FastAPI query service is served through httpx ASGITransport,
so streaming, error statuses and request payloads go over real HTTP
handling without network access.
"""
