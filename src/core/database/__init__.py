"""Database connection and repository base for Trilha.

Connection setup lives in ``src.core.database.async_cassandra`` and is imported
lazily by the application lifespan.
"""
