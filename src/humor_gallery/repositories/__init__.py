"""Data access helpers wrapping the SQLAlchemy session."""

from .image_repo import ImageRepository
from .vote_repo import InsertOutcome, InsertResult, VoteRepository

__all__ = ["ImageRepository", "InsertOutcome", "InsertResult", "VoteRepository"]
