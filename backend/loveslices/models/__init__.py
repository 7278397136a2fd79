from loveslices.models.user import User, UserRole
from loveslices.models.question import Question
from loveslices.models.response import Response
from loveslices.models.loveslice import Loveslice
from loveslices.models.conversation import Conversation, ConversationOutcome
from loveslices.models.spoken_loveslice import SpokenLoveslice
from loveslices.models.journal_entry import JournalEntry, SpokenRef, WrittenRef

__all__ = [
    "User",
    "UserRole",
    "Question",
    "Response",
    "Loveslice",
    "Conversation",
    "ConversationOutcome",
    "SpokenLoveslice",
    "JournalEntry",
    "SpokenRef",
    "WrittenRef",
]
