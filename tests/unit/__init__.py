"""Unit tests for individual components in isolation.

Coverage:
    - streaming/: Line framing, event folding, decode_stream outcomes
    - client/: Configuration loading and validation
    - models/: Request and state validation
    - ui/: Chart type selection, table and CSV conversion
"""
