import asyncio
import io
from typing import Dict, Generator, List, Optional, Tuple

import pytest
from app.application.services.auth_service import AuthService
from app.application.services.file_service import FileService
from app.application.services.status_service import StatusService
from app.application.services.thumbnail_service import ThumbnailService
from app.application.services.user_service import UserService
from app.domain.models.file import File
from app.domain.models.health_status import HealthStatus
from app.domain.models.user import User
from app.infrastructure.external.file_storage.local_file_storage import LocalFileStorage
from app.infrastructure.external.image.pillow_thumbnailer import PillowThumbnailer
from app.interfaces.endpoints.routes import router as api_router
from app.interfaces.errors.exception_handlers import register_exception_handlers
from app.interfaces.service_dependencies import (
    get_auth_service,
    get_file_service,
    get_status_service,
    get_user_service,
)
from core.security import get_password_hash
from fastapi import FastAPI
from fastapi.testclient import TestClient
from PIL import Image


class InMemoryDatabase:
    """测试用的内存数据库，文件id自增"""

    def __init__(self) -> None:
        self.users: Dict[str, User] = {}
        self.files: Dict[int, File] = {}
        self.next_file_id = 1
        self.fail_file_create = False


class FakeFileRepo:
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def create(self, file: File) -> File:
        if self._db.fail_file_create:
            raise RuntimeError("metadata store unavailable")
        file_id = self._db.next_file_id
        self._db.next_file_id += 1
        created = file.model_copy(update={"id": str(file_id)})
        self._db.files[file_id] = created
        return created

    async def get_by_id(self, file_id: str) -> Optional[File]:
        return self._db.files.get(int(file_id))

    async def get_by_id_and_owner(self, file_id: str, user_id: str) -> Optional[File]:
        file = self._db.files.get(int(file_id))
        return file if file is not None and file.user_id == user_id else None

    async def list_by_parent(
        self, user_id: str, parent_id: str, skip: int, limit: int
    ) -> List[File]:
        matched = [
            self._db.files[key]
            for key in sorted(self._db.files)
            if self._db.files[key].user_id == user_id
            and self._db.files[key].parent_id == parent_id
        ]
        return matched[skip : skip + limit]

    async def set_public(
        self, file_id: str, user_id: str, is_public: bool
    ) -> Optional[File]:
        file = await self.get_by_id_and_owner(file_id, user_id)
        if file is None:
            return None
        updated = file.model_copy(update={"is_public": is_public})
        self._db.files[int(file_id)] = updated
        return updated

    async def count(self) -> int:
        return len(self._db.files)


class FakeUserRepo:
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def create(self, user: User) -> User:
        self._db.users[user.id] = user
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._db.users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._db.users.values() if u.email == email), None)

    async def count(self) -> int:
        return len(self._db.users)


class FakeUnitOfWork:
    def __init__(self, db: InMemoryDatabase) -> None:
        self.file = FakeFileRepo(db)
        self.user = FakeUserRepo(db)

    async def commit(self):
        return None

    async def rollback(self):
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


class FakeSessionStore:
    def __init__(self) -> None:
        self.sessions: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}
        self.available = True

    async def get(self, token: str) -> Optional[str]:
        if not self.available:
            raise ConnectionError("session store unavailable")
        return self.sessions.get(token)

    async def set(self, token: str, user_id: str, ttl_seconds: int) -> None:
        self.sessions[token] = user_id
        self.ttls[token] = ttl_seconds

    async def delete(self, token: str) -> None:
        self.sessions.pop(token, None)

    async def is_available(self) -> bool:
        return self.available


class FakeMessageQueue:
    """内存消息队列，记录投递、确认与失败的消息"""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, str]] = []
        self.acked: List[str] = []
        self.failed: List[Tuple[str, str]] = []
        self.fail_put = False
        self._cursor = 0
        self._counter = 0

    async def put(self, message: str) -> str:
        if self.fail_put:
            raise ConnectionError("queue unavailable")
        self._counter += 1
        message_id = f"{self._counter}-0"
        self.messages.append((message_id, message))
        return message_id

    async def get(self, consumer: str, block_ms: Optional[int] = None):
        if self._cursor < len(self.messages):
            message = self.messages[self._cursor]
            self._cursor += 1
            return message
        await asyncio.sleep(0.01)
        return None, None

    async def ack(self, message_id: str) -> None:
        self.acked.append(message_id)

    async def fail(self, message_id: str, message, error: str) -> None:
        self.failed.append((message_id, error))
        await self.ack(message_id)


def make_png(width: int = 1000, height: int = 500) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def uow_factory(db: InMemoryDatabase):
    def factory() -> FakeUnitOfWork:
        return FakeUnitOfWork(db)

    return factory


@pytest.fixture
def owner(db: InMemoryDatabase) -> User:
    user = User(
        id="owner-1",
        email="owner@example.com",
        password_hash=get_password_hash("secret"),
    )
    db.users[user.id] = user
    return user


@pytest.fixture
def visitor(db: InMemoryDatabase) -> User:
    user = User(
        id="visitor-1",
        email="visitor@example.com",
        password_hash=get_password_hash("secret"),
    )
    db.users[user.id] = user
    return user


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def message_queue() -> FakeMessageQueue:
    return FakeMessageQueue()


@pytest.fixture
def file_storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(root=str(tmp_path / "files"))


@pytest.fixture
def thumbnail_service(uow_factory, file_storage, message_queue) -> ThumbnailService:
    return ThumbnailService(
        uow_factory=uow_factory,
        file_storage=file_storage,
        thumbnailer=PillowThumbnailer(),
        message_queue=message_queue,
    )


@pytest.fixture
def file_service(uow_factory, file_storage, thumbnail_service) -> FileService:
    return FileService(
        uow_factory=uow_factory,
        file_storage=file_storage,
        thumbnail_service=thumbnail_service,
        store_timeout_seconds=5.0,
    )


@pytest.fixture
def auth_service(uow_factory, session_store) -> AuthService:
    return AuthService(
        uow_factory=uow_factory,
        session_store=session_store,
        store_timeout_seconds=5.0,
    )


class FakeHealthChecker:
    def __init__(self, service_name: str, ok: bool = True) -> None:
        self.service_name = service_name
        self.ok = ok

    async def check(self) -> HealthStatus:
        status = "ok" if self.ok else "error"
        return HealthStatus(service=self.service_name, status=status)


@pytest.fixture
def client(
    uow_factory, file_service, auth_service
) -> Generator[TestClient, None, None]:
    """使用真实路由与异常处理器、替换服务依赖后的测试客户端"""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(api_router)

    app.dependency_overrides[get_file_service] = lambda: file_service
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_user_service] = lambda: UserService(
        uow_factory=uow_factory
    )
    app.dependency_overrides[get_status_service] = lambda: StatusService(
        checkers=[FakeHealthChecker("redis"), FakeHealthChecker("db", ok=False)],
        uow_factory=uow_factory,
    )

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def login(session_store: FakeSessionStore):
    """为用户创建会话并返回请求头"""

    def _login(user: User) -> Dict[str, str]:
        token = f"token-{user.id}"
        session_store.sessions[token] = user.id
        return {"X-Token": token}

    return _login


@pytest.fixture
def png_bytes() -> bytes:
    """1000x500的PNG图片"""
    return make_png()
