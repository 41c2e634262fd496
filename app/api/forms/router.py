from fastapi import APIRouter
from app.api.forms import authoring, exports

router = APIRouter()
router.include_router(authoring.router, tags=["Forms"])
router.include_router(exports.router, tags=["FormExports"])
