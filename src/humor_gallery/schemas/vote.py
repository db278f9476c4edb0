"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class VoteCreate(BaseModel):
    """Schema for casting or changing a vote.

    Fields are deliberately loose; direction and caption checks happen in the
    vote recorder so that bad input maps to 400 rather than 422.
    """

    model_config = ConfigDict(populate_by_name=True)

    caption_id: str | None = Field(None, alias="captionId", description="Caption being voted on")
    direction: StrictInt | None = Field(None, description="1 for upvote, -1 for downvote")


class VoteDelete(BaseModel):
    """Schema for undoing a vote."""

    model_config = ConfigDict(populate_by_name=True)

    caption_id: str | None = Field(None, alias="captionId", description="Caption whose vote to remove")


class VoteResponse(BaseModel):
    """Direction persisted for the caller; 0 means no vote."""

    direction: int


class VoteDeleteResponse(BaseModel):
    ok: bool = True
