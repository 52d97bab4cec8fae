"""
Pydantic schema definitions for API payloads.

Each entity defines a ``Create`` schema (required fields, validated on
creation), an ``Update`` schema (every field optional; only the
fields present in the payload are applied) and a ``Read`` schema (the
stored record as returned by the API).
"""
