from fastapi import APIRouter

from loveslices.api.routes import auth, conversations, journal, loveslices, responses, users


api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(journal.router, prefix="/journal", tags=["journal"])
api_router.include_router(responses.router, prefix="/responses", tags=["responses"])
api_router.include_router(loveslices.router, prefix="/loveslices", tags=["loveslices"])
api_router.include_router(
    conversations.router, prefix="/conversations", tags=["conversations"]
)
