"""
Endpoint modules.

Each module defines an ``APIRouter`` for one entity.  ``crud`` holds
the routes every entity shares; entity modules declare their own
extra routes and then include the shared ones.
"""
