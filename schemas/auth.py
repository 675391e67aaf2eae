"""Schemas describing the authenticated caller."""

from pydantic import BaseModel, Field

from models.enums import ActorRole


class ActingUser(BaseModel):
    """The user on whose behalf a hierarchy operation runs."""

    employee_id: int | None = Field(
        default=None,
        description="Employee record of the acting user, if linked",
    )
    role: ActorRole = Field(
        description="Role used for permission checks",
    )
