"""
Application package initializer.

The project is organised by layer: ``core`` holds configuration,
logging, errors, validators and the in-memory store; ``schemas``
holds the typed request/response models for each entity; ``services``
holds the generic CRUD engine and its per-entity configurations; and
``api`` wires URLs to service calls.

Importing :func:`create_app` here keeps ``inventory_api.app`` usable
as the ASGI target factory.
"""

from .main import app, create_app  # noqa: F401
