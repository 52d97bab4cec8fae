"""
Service layer.

``base.EntityService`` holds the CRUD, query and bulk logic shared by
every entity; each ``*_service`` module configures it for one entity.
``registry.ServiceRegistry`` builds one store and one service per
entity when the application starts.
"""
