"""Core logic for the Order Card field engine.

The Gradio UI lives in `app.py`. This package contains the pieces that:
- describe card fields and where their values come from
- resolve source paths against an order payload
- extract values with regex rules and normalize dates
- render order cards with label lookups
- drive status, assignee and notes updates
"""
