"""Infrastructure layer: local item cache, backends, database.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It must never import from services, commands, or output.
"""
