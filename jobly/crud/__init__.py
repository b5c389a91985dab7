"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer sits between the API routes and the database, following the
Repository pattern.
"""

from jobly.crud import company, job, user

__all__ = ["company", "job", "user"]
