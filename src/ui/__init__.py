"""NiceGUI interface - thin visualization layer for question answering.

Responsibilities:
    - Chat message display with live streamed text
    - Results tables, charts and CSV export
    - Example questions and session reset

Contains minimal business logic. Delegates all requests to the client.
"""
