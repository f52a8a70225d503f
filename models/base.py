"""
Base schemas for all models.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM-style objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        protected_namespaces=()
    )


class FrozenSchema(BaseSchema):
    """
    Base for parse outputs.

    Instances cannot be reassigned after construction; callers keep their
    edits in a separate overlay and merge at apply time.
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        frozen=True,
        protected_namespaces=()
    )
