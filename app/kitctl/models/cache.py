"""Display-name cache entry model."""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class DisplayNameCacheEntry(BaseModel):
    """Resolved display name for a package identifier.

    Entries never expire; a stale name is an accepted tradeoff against
    re-querying the package manager for every listing.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    package_id: Annotated[str, Field(min_length=1, description="Package identifier")]
    display_name: Annotated[str, Field(min_length=1, description="Resolved display name")]
    cached_at: Annotated[
        datetime,
        Field(default_factory=lambda: datetime.now(UTC), description="Resolution time"),
    ]
