"""Base model for all klay Pydantic models.

This module provides a base model class that enforces consistent validation
and serialization behavior across all klay models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class KlayBaseModel(BaseModel):
    """Base model class for all klay Pydantic models.

    Strings are never stripped: key outputs such as U+0020 are significant.
    Enum members are kept as members so that they can be used as mapping keys.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary with consistent serialization parameters.

        Returns:
            Dictionary representation using JSON-compatible serialization
        """
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")

    def to_dict_full(self) -> dict[str, Any]:
        """Convert model to dictionary including all fields (even unset ones)."""
        return self.model_dump(by_alias=True, exclude_unset=False, mode="json")
