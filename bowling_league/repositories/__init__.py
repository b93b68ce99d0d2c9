from .document import DocumentScoringRepository
from .sql import SqlScoringRepository

__all__ = ["DocumentScoringRepository", "SqlScoringRepository"]
