from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from loveslices.models.conversation import ConversationOutcome
from loveslices.schemas.user import UserSummary


class QuestionPublic(BaseModel):
    id: int
    content: str
    theme: str
    user_generated: bool | None = None
    is_approved: bool | None = None
    created_by_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class ResponseView(BaseModel):
    # Response fields stay None when the response row is missing
    id: int | None = None
    user_id: int | None = None
    question_id: int | None = None
    content: str | None = None
    created_at: datetime | None = None
    user: UserSummary | None = None


class WrittenLovesliceView(BaseModel):
    id: int
    question_id: int
    user1_id: int
    user2_id: int
    response1_id: int
    response2_id: int
    private_note: str | None = None
    type: str
    has_started_conversation: bool | None = None
    created_at: datetime
    question: QuestionPublic | None = None
    responses: list[ResponseView] = Field(default_factory=list)


class ConversationPublic(BaseModel):
    id: int
    loveslice_id: int | None = None
    initiated_by_user_id: int
    started_at: datetime
    ended_at: datetime | None = None
    duration_seconds: int | None = None
    outcome: ConversationOutcome | None = None
    created_spoken_loveslice: bool | None = None
    final_note: str | None = None

    model_config = ConfigDict(from_attributes=True)


class SpokenLovesliceView(BaseModel):
    id: int
    conversation_id: int
    user1_id: int
    user2_id: int
    outcome: ConversationOutcome
    theme: str
    duration_seconds: int
    continued_offline: bool
    created_at: datetime
    conversation: ConversationPublic | None = None


class JournalEntryPublic(BaseModel):
    id: int
    user1_id: int
    user2_id: int
    written_loveslice_id: int | None = None
    spoken_loveslice_id: int | None = None
    theme: str
    searchable_content: str
    created_at: datetime
    written_loveslice: WrittenLovesliceView | None = None
    spoken_loveslice: SpokenLovesliceView | None = None

    model_config = ConfigDict(from_attributes=True)


class JournalEntryCreate(BaseModel):
    written_loveslice_id: int | None = None
    spoken_loveslice_id: int | None = None
    theme: str = Field(min_length=1, max_length=100)
    searchable_content: str = Field(min_length=1)

    @model_validator(mode="after")
    def exactly_one_loveslice(self):
        has_written = self.written_loveslice_id is not None
        has_spoken = self.spoken_loveslice_id is not None
        if has_written == has_spoken:
            raise ValueError(
                "Exactly one of written_loveslice_id or spoken_loveslice_id is required"
            )
        return self
