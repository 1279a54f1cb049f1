"""Data Assistant - conversational front end for a natural-language query service.

Submits questions to the ask-question API and renders answers as live
streamed text followed by tabular results and chart hints.
"""
