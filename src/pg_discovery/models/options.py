"""Discovery options model."""

import warnings
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Suppress the specific warning about field 'schema' shadowing
warnings.filterwarnings(
    "ignore",
    message='Field name "schema" in "DiscoveryOptions" shadows an attribute in parent',
    category=UserWarning,
)


class DiscoveryOptions(BaseModel):
    """Options accepted by every discovery operation.

    ``owner`` and ``schema`` are synonyms; ``offset`` and ``skip`` too.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    owner: Optional[str] = Field(None, description="Schema to restrict discovery to")
    schema: Optional[str] = Field(None, description="Synonym for owner")
    all: bool = Field(
        default=False, description="List across all schemas when no owner is given"
    )
    views: bool = Field(default=False, description="Include views in model listing")
    offset: Optional[int] = Field(None, ge=0, description="Pagination start")
    skip: Optional[int] = Field(None, ge=0, description="Synonym for offset")
    limit: Optional[int] = Field(None, ge=0, description="Pagination size")

    @property
    def resolved_owner(self) -> Optional[str]:
        """Owner filter, falling back to schema."""
        return self.owner or self.schema

    @property
    def start(self) -> int:
        """Pagination start, falling back to skip, then 0."""
        return self.offset or self.skip or 0

    @property
    def paginated(self) -> bool:
        """Whether any paging option is set."""
        return bool(self.offset or self.skip or self.limit)
