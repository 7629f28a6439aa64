"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from ticketing.config import settings
from ticketing.database import Base, engine
from ticketing.routers import users, communities, events, forms, responses, check_in

# Registers every table on Base.metadata before create_all
from ticketing.models import check_in as _check_in, community, event, form, form_response, user  # noqa: F401

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

FORM_PREFIX = "/api/events/{event_id}/forms/{form_id}"

app = FastAPI(
    title=settings.APP_NAME,
    description="Event registration forms, QR tickets and exactly-once check-in",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Collaborators
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(communities.router, prefix="/api/communities", tags=["Communities"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])

# Registration and admission
app.include_router(forms.router, prefix="/api/events/{event_id}/forms", tags=["Forms"])
app.include_router(responses.router, prefix=f"{FORM_PREFIX}/responses", tags=["Registration"])
app.include_router(check_in.router, prefix=FORM_PREFIX, tags=["CheckIn"])


@app.on_event("startup")
def on_startup():
    """SQLite is a dev/test store; PostgreSQL schemas come from alembic."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
        logger.info("Created SQLite tables for %s", settings.DATABASE_URL)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}
