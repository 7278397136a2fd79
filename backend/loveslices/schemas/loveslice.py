from pydantic import BaseModel, Field

from loveslices.schemas.journal import ResponseView, WrittenLovesliceView


class ResponseCreate(BaseModel):
    question_id: int
    content: str = Field(min_length=1)


class ResponseSubmitted(BaseModel):
    response: ResponseView
    # Set when the partner had already answered and the pair was formed
    loveslice: WrittenLovesliceView | None = None
    journal_entry_id: int | None = None


class LovesliceNoteUpdate(BaseModel):
    note: str | None = None
