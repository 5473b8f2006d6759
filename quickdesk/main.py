from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quickdesk.core.config import settings
from quickdesk.core.database import Base, SessionLocal, engine

# Import models so SQLAlchemy registers tables for create_all().
import quickdesk.models.agent_rating  # noqa: F401
import quickdesk.models.category  # noqa: F401
import quickdesk.models.chat_message  # noqa: F401
import quickdesk.models.notification  # noqa: F401
import quickdesk.models.ticket  # noqa: F401
import quickdesk.models.user  # noqa: F401

# Routes
from quickdesk.api.routes import agents, auth, categories, chat, notifications, tickets, users
from quickdesk.models.user import ROLE_ADMIN, User
from quickdesk.services.auth_service import hash_password
from quickdesk.services.category_service import seed_default_categories

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _bootstrap_admin() -> None:
    db = SessionLocal()
    try:
        email = settings.ADMIN_BOOTSTRAP_EMAIL.lower()
        admin = db.query(User).filter(User.email == email).first()
        password_hash = hash_password(settings.ADMIN_BOOTSTRAP_PASSWORD)
        if not admin:
            admin = User(
                username=settings.ADMIN_BOOTSTRAP_USERNAME,
                email=email,
                password_hash=password_hash,
                role=ROLE_ADMIN,
                specializations=[],
            )
            db.add(admin)
            db.commit()
            logger.info("Bootstrapped admin user '%s'", email)
        else:
            admin.password_hash = password_hash
            admin.role = ROLE_ADMIN
            db.commit()
            logger.info("Updated admin user '%s' from bootstrap settings", email)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up: initializing database...")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_default_categories(db)
    finally:
        db.close()

    # Optional admin bootstrap for first-time setup (or password reset).
    if settings.ADMIN_BOOTSTRAP_EMAIL and settings.ADMIN_BOOTSTRAP_PASSWORD:
        _bootstrap_admin()

    logger.info("Database initialized successfully.")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# Allow frontend access (tighten allow_origins in production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Auth"])
app.include_router(users.router, prefix=f"{settings.API_PREFIX}/users", tags=["Users"])
app.include_router(categories.router, prefix=f"{settings.API_PREFIX}/categories", tags=["Categories"])
app.include_router(tickets.router, prefix=f"{settings.API_PREFIX}/tickets", tags=["Tickets"])
app.include_router(chat.router, prefix=f"{settings.API_PREFIX}/chat", tags=["Chat"])
app.include_router(notifications.router, prefix=f"{settings.API_PREFIX}/notifications", tags=["Notifications"])
app.include_router(agents.router, prefix=f"{settings.API_PREFIX}/agents", tags=["Agents"])


@app.get("/")
def read_root():
    return {"status": "success", "message": f"Welcome to {settings.PROJECT_NAME} API"}
