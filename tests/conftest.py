import os
import shutil
import tempfile
from pathlib import Path

# Configuration de test, avant tout import de leaders.config
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="leaders-tests-"))
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["UPLOAD_DIR"] = str(_TEST_ROOT / "media")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_EMAILS"] = '["admin@example.com"]'
os.environ["LOG_LEVEL"] = "WARNING"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import update  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from leaders.auth.models import Role, User  # noqa: E402
from leaders.config import settings  # noqa: E402
from leaders.db.session import Base, get_db, init_models  # noqa: E402
from leaders.main import app  # noqa: E402
from leaders.utils.uploads import setup_directories  # noqa: E402

from helpers import DEFAULT_PASSWORD, auth_headers  # noqa: E402


@pytest_asyncio.fixture
async def engine():
    """Base SQLite en mémoire partagée par toutes les sessions du test"""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_models(bind=test_engine)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def upload_dir():
    """Dossier UPLOAD_DIR servi par l'application, vidé après chaque test"""
    path = Path(settings.UPLOAD_DIR)
    setup_directories()
    yield path
    for child in path.iterdir():
        if child.is_dir():
            shutil.rmtree(child)
        else:
            child.unlink()


@pytest_asyncio.fixture
async def client(session_factory, upload_dir):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Inscrit un membre et retourne {"token", "user", "headers"}"""
    async def _register(email: str, first_name: str = "Test", last_name: str = "User", password: str = DEFAULT_PASSWORD):
        response = await client.post("/api/auth/register", json={
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
        })
        assert response.status_code == 201, response.text
        data = response.json()
        data["headers"] = auth_headers(data["token"])
        return data

    return _register


@pytest.fixture
def set_role(session_factory):
    """Change le rôle d'un membre directement en base"""
    async def _set_role(user_id: int, role: Role):
        async with session_factory() as session:
            await session.execute(update(User).where(User.id == user_id).values(role=role.value))
            await session.commit()

    return _set_role


@pytest_asyncio.fixture
async def admin(register_user):
    return await register_user("admin@example.com", "Ada", "Admin")


@pytest_asyncio.fixture
async def instructor(register_user, set_role):
    data = await register_user("instructor@example.com", "Ines", "Instructeur")
    await set_role(data["user"]["id"], Role.INSTRUCTOR)
    return data


@pytest_asyncio.fixture
async def alice(register_user):
    return await register_user("alice@example.com", "Alice", "Martin")


@pytest_asyncio.fixture
async def bob(register_user):
    return await register_user("bob@example.com", "Bob", "Durand")


@pytest_asyncio.fixture
async def carol(register_user):
    return await register_user("carol@example.com", "Carol", "Petit")
