"""Infrastructure layer — database, versioned stores, inventory client.

This layer depends on stdlib, the domain layer, and third-party libs
(SQLAlchemy, requests). It must never import from services, commands,
or output.
"""
