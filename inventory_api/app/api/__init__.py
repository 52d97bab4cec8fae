"""
API package.

``router`` aggregates one sub-router per entity; ``endpoints`` holds
the controllers and ``deps`` the dependencies that hand each
controller its service.
"""
