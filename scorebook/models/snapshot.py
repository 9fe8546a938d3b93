from datetime import datetime
from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from scorebook.database import Base
from scorebook.models.match import utc_now


class CollectionSnapshot(Base):
    """
    Whole-collection snapshot keyed by collection name.
    Each save replaces the payload; there are no partial writes.
    """
    __tablename__ = "collection_snapshots"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)  # "matches", "players", "rosters"
    payload: Mapped[str] = mapped_column(Text, default="[]")  # JSON array
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<CollectionSnapshot {self.key}>"
