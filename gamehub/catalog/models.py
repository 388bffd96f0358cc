"""
Catalog Models - One record per game shown on the portal.

Records are plain data loaded from JSON. A record may link to a
playable engine through game_type/variant; records without one are
listed but cannot start a session.
"""

from typing import Optional
from pydantic import AliasChoices, BaseModel, Field


class GameRecord(BaseModel):
    """A game listed in the catalog."""
    id: int = Field(..., description="Stable catalog id")
    title: str = Field(..., min_length=1)
    description: str = ""
    url: str = Field(..., description="Where the game is played")
    image: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("image", "imageUrl"),
        description="Thumbnail URL",
    )
    category: str = "Arcade"
    featured: bool = False

    # Engine link
    game_type: Optional[str] = Field(None, description="Registered game type")
    variant: Optional[str] = None

    model_config = {"from_attributes": True}

    @property
    def playable(self) -> bool:
        return self.game_type is not None
