import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from leaders.config import settings
from leaders.db.session import init_models
from leaders.utils.uploads import UPLOAD_MOUNT_PATH, setup_directories

from leaders.auth.api import router as auth_router
from leaders.users.api import router as users_router
from leaders.matching.api import swipes_router, matches_router
from leaders.messages.api import router as messages_router
from leaders.events.api import router as events_router
from leaders.courses.api import router as courses_router
from leaders.posts.api import router as posts_router
from leaders.inspirations.api import router as inspirations_router

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_directories()
    await init_models()
    logger.info("🚀 Leaders Sensibles API démarrée")
    yield


app = FastAPI(title="Leaders Sensibles API", lifespan=lifespan)

# Création dossier uploads
upload_dir = Path(settings.UPLOAD_DIR)
upload_dir.mkdir(parents=True, exist_ok=True)

# Seul UPLOAD_DIR est exposé, sous le préfixe des URLs publiques
app.mount(UPLOAD_MOUNT_PATH, StaticFiles(directory=str(upload_dir)), name="uploads")

# Ajout des routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(swipes_router)
app.include_router(matches_router)
app.include_router(messages_router)
app.include_router(events_router)
app.include_router(courses_router)
app.include_router(posts_router)
app.include_router(inspirations_router)

# Middleware CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"message": "Bienvenue sur l'API Leaders Sensibles !"}


@app.get("/health")
async def health():
    return {"status": "ok"}
