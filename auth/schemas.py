"""
Pydantic schemas for the auth module.
"""

from pydantic import BaseModel


class Identity(BaseModel):
    """The authenticated user, as seen by route handlers."""
    id: str
    username: str
    first_name: str = ""
    last_name: str = ""
