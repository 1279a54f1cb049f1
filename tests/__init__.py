"""Test package for the Data Assistant client.

Structure:
    - unit/: Framing, event folding, decoding, config and chart helpers
    - integration/: API client against a scripted query service
"""
