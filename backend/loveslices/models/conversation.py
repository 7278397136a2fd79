from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Text,
)

from loveslices.db.base import Base


class ConversationOutcome(str, PyEnum):
    CONNECTED = "connected"
    TRIED_AND_LISTENED = "tried_and_listened"
    HARD_BUT_HONEST = "hard_but_honest"
    NO_OUTCOME = "no_outcome"


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, index=True)
    loveslice_id = Column(Integer, ForeignKey("loveslices.id"), nullable=True)
    initiated_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    ended_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    outcome = Column(
        SQLEnum(ConversationOutcome),
        nullable=True,
        default=ConversationOutcome.NO_OUTCOME,
    )
    created_spoken_loveslice = Column(Boolean, nullable=False, default=False)
    final_note = Column(Text, nullable=True)
