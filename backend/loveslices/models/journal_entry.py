from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text

from loveslices.db.base import Base


@dataclass(frozen=True)
class WrittenRef:
    loveslice_id: int


@dataclass(frozen=True)
class SpokenRef:
    spoken_loveslice_id: int


LovesliceRef = WrittenRef | SpokenRef | None


class JournalEntry(Base):
    __tablename__ = "journal_entries"
    __table_args__ = (
        CheckConstraint(
            "written_loveslice_id IS NULL OR spoken_loveslice_id IS NULL",
            name="ck_journal_entries_single_loveslice",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user1_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user2_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    written_loveslice_id = Column(Integer, ForeignKey("loveslices.id"), nullable=True)
    spoken_loveslice_id = Column(Integer, ForeignKey("spoken_loveslices.id"), nullable=True)
    theme = Column(String(100), nullable=False, index=True)
    searchable_content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    @property
    def loveslice_ref(self) -> LovesliceRef:
        """Which loveslice this entry points at, if any."""
        if self.written_loveslice_id is not None:
            return WrittenRef(self.written_loveslice_id)
        if self.spoken_loveslice_id is not None:
            return SpokenRef(self.spoken_loveslice_id)
        return None
