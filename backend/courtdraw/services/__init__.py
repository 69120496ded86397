"""
Services Layer

Fixture business logic that:
- Accepts domain inputs (IDs, sessions, caller identity, config)
- Returns domain outputs (models, result objects, dicts)
- Does NOT depend on HTTP request/response objects
- Raises courtdraw.errors exceptions; routes map them to status codes
"""
