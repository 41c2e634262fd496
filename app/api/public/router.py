from fastapi import APIRouter
from app.api.public import submissions

router = APIRouter()
router.include_router(submissions.router, prefix="/submissions", tags=["Public"])
