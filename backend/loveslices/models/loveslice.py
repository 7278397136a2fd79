from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from loveslices.db.base import Base


class Loveslice(Base):
    """Two responses to the same question, one from each partner."""

    __tablename__ = "loveslices"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    user1_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user2_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    response1_id = Column(Integer, ForeignKey("responses.id"), nullable=False)
    response2_id = Column(Integer, ForeignKey("responses.id"), nullable=False)
    private_note = Column(Text, nullable=True)
    type = Column(String(16), nullable=False, default="written")
    has_started_conversation = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
