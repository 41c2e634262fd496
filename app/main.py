import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.errors import install_error_handlers
from app.core.http_hardening import REQUEST_ID_HEADER, install_http_hardening
from app.api.forms.router import router as forms_router
from app.api.public.router import router as public_router

logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s %(message)s")
logging.getLogger("app").setLevel(settings.LOG_LEVEL.upper())

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, **settings.docs_urls)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", REQUEST_ID_HEADER],
    # Browsers hide these from the editor unless exposed.
    expose_headers=["Content-Disposition", REQUEST_ID_HEADER],
)
install_http_hardening(app)
install_error_handlers(app)

# Authoring-side checks and exports; the public side only validates submissions.
app.include_router(forms_router, prefix="/api/forms")
app.include_router(public_router, prefix="/api/public")

@app.get("/", include_in_schema=False)
def landing():
    return {"service": settings.APP_NAME, "version": settings.APP_VERSION, "env": settings.APP_ENV}

@app.get("/health")
def health():
    return {"status": "ok"}
