from pydantic import BaseModel, Field

from loveslices.models.conversation import ConversationOutcome
from loveslices.schemas.journal import ConversationPublic, SpokenLovesliceView


class ConversationCreate(BaseModel):
    loveslice_id: int | None = None


class ConversationEnd(BaseModel):
    outcome: ConversationOutcome
    create_spoken_loveslice: bool = False
    continue_offline: bool = False
    theme: str | None = Field(default=None, max_length=100)


class ConversationEnded(BaseModel):
    conversation: ConversationPublic
    spoken_loveslice: SpokenLovesliceView | None = None
    journal_entry_id: int | None = None
