from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
)

from loveslices.db.base import Base
from loveslices.models.conversation import ConversationOutcome


class SpokenLoveslice(Base):
    """A loveslice logged from an in-person conversation."""

    __tablename__ = "spoken_loveslices"

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(Integer, ForeignKey("conversations.id"), nullable=False)
    user1_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user2_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    outcome = Column(SQLEnum(ConversationOutcome), nullable=False)
    theme = Column(String(100), nullable=False)
    duration_seconds = Column(Integer, nullable=False)
    continued_offline = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
