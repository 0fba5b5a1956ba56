# tests/conftest.py

import os
from typing import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import date

# --- 테스트용 환경 변수 ---
# labtrack.core.config의 Settings는 임포트 시점에 생성되므로, 앱을 임포트하기 전에 설정해야 합니다.
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-labtrack")
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["APP_ENV"] = "testing"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from labtrack.main import app as main_app
from labtrack.core import dependencies as deps
from labtrack.core.security import get_password_hash
from labtrack.storage import IStorage, MemoryStorage, DatabaseStorage
from labtrack.domains.usr import models as usr_models
from labtrack.domains.usr import schemas as usr_schemas
from labtrack.domains.lab import models as lab_models
from labtrack.domains.lab import schemas as lab_schemas
from labtrack.domains.transport import models as transport_models
from labtrack.domains.transport import schemas as transport_schemas

# 데이터베이스 저장소 테스트는 인메모리 SQLite(aiosqlite)를 사용합니다.
TEST_DATABASE_URL = "sqlite+aiosqlite://"


# --- 저장소 픽스처 ---
# 모든 테스트는 메모리 저장소와 데이터베이스 저장소 두 가지 구현에 대해 각각 실행됩니다.
@pytest_asyncio.fixture(scope="function", params=["memory", "database"])
async def storage(request) -> AsyncGenerator[IStorage, None]:
    if request.param == "memory":
        store: IStorage = MemoryStorage()
    else:
        store = DatabaseStorage(TEST_DATABASE_URL)
    await store.initialize()
    try:
        yield store
    finally:
        await store.close()


# --- 기준 데이터 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_lab_a(storage: IStorage) -> lab_models.Lab:
    return await storage.create_lab(lab_schemas.LabCreate(name="Laboratoire A", code="LAB-A"))


@pytest_asyncio.fixture(scope="function")
async def test_lab_b(storage: IStorage) -> lab_models.Lab:
    return await storage.create_lab(lab_schemas.LabCreate(name="Laboratoire B", code="LAB-B"))


@pytest.fixture(scope="function")
def tube_factory(storage: IStorage, test_lab_a: lab_models.Lab) -> Callable[..., Awaitable[transport_models.Tube]]:
    """바코드와 보관 온도를 지정하여 튜브를 생성하는 팩토리 함수를 반환합니다."""
    async def _create_tube(
        barcode: str,
        temperature: transport_models.TemperatureType = transport_models.TemperatureType.COLD,
        lab_id: int = None,
    ) -> transport_models.Tube:
        return await storage.create_tube(transport_schemas.TubeCreate(
            barcode=barcode,
            type="blood",
            patient_id=f"P-{barcode}",
            collection_date=date(2025, 1, 15),
            temperature_requirement=temperature,
            lab_id=lab_id or test_lab_a.id,
        ))
    return _create_tube


@pytest.fixture(scope="function")
def box_factory(storage: IStorage, test_lab_a: lab_models.Lab) -> Callable[..., Awaitable[transport_models.Box]]:
    """바코드와 온도 등급을 지정하여 박스를 생성하는 팩토리 함수를 반환합니다."""
    async def _create_box(
        barcode: str,
        temperature: transport_models.TemperatureType = transport_models.TemperatureType.COLD,
        lab_id: int = None,
    ) -> transport_models.Box:
        return await storage.create_box(transport_schemas.BoxCreate(
            barcode=barcode,
            temperature_type=temperature,
            source_lab_id=lab_id or test_lab_a.id,
        ))
    return _create_box


# --- 역할별 사용자 픽스처 ---
@pytest.fixture(scope="function")
def user_factory(storage: IStorage) -> Callable[..., Awaitable[usr_models.User]]:
    """역할과 속성을 지정하여 테스트 사용자를 저장소에 생성하는 팩토리 함수를 반환합니다."""
    async def _create_user(
        username: str,
        password: str,
        role: usr_models.UserRole,
        is_active: bool = True,
        **kwargs,
    ) -> usr_models.User:
        user_in = usr_schemas.UserBase(
            username=username,
            name=kwargs.pop("name", username.title()),
            role=role,
            barcode=kwargs.pop("barcode", f"EMP-{username.upper()}"),
            is_active=is_active,
        )
        return await storage.create_user(user_in, get_password_hash(password))
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_admin_user(user_factory: Callable) -> usr_models.User:
    """관리자(ADMIN) 사용자를 생성합니다."""
    return await user_factory("sysadm", "sysadmpass123", role=usr_models.UserRole.ADMIN, name="System Admin")


@pytest_asyncio.fixture(scope="function")
async def test_technician(user_factory: Callable) -> usr_models.User:
    """검체 담당 기사(TECHNICIAN)를 생성합니다."""
    return await user_factory("tech", "techpass123", role=usr_models.UserRole.TECHNICIAN, name="Lab Technician")


# --- 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(storage: IStorage) -> AsyncGenerator[AsyncClient, None]:
    """인증되지 않은 AsyncClient를 반환합니다. 저장소는 테스트용 인스턴스로 교체됩니다."""
    original_overrides = main_app.dependency_overrides.copy()
    main_app.dependency_overrides[deps.get_storage] = lambda: storage
    try:
        transport = ASGITransport(app=main_app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


@pytest.fixture(scope="function")
def authorized_client_factory(storage: IStorage):
    """
    특정 사용자로 실제 로그인(/api/auth/token)한 AsyncClient를 만드는 비동기 컨텍스트 매니저를 반환합니다.
    """
    @asynccontextmanager
    async def _create_client_context(user: usr_models.User, password: str) -> AsyncGenerator[AsyncClient, None]:
        original_overrides = main_app.dependency_overrides.copy()
        main_app.dependency_overrides[deps.get_storage] = lambda: storage
        try:
            transport = ASGITransport(app=main_app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                res = await ac.post("/api/auth/token", data={"username": user.username, "password": password})
                if res.status_code != 200:
                    pytest.fail(f"Login failed for {user.username}: {res.text}")

                token = res.json()["access_token"]
                ac.headers["Authorization"] = f"Bearer {token}"
                # 헤더 인증만 검증하도록 로그인 쿠키는 제거합니다.
                ac.cookies.clear()
                yield ac
        finally:
            main_app.dependency_overrides.clear()
            main_app.dependency_overrides.update(original_overrides)

    return _create_client_context


@pytest_asyncio.fixture(scope="function")
async def admin_client(authorized_client_factory, test_admin_user: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    """관리자로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_admin_user, "sysadmpass123") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def authorized_client(authorized_client_factory, test_technician: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    """일반 사용자(TECHNICIAN)로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_technician, "techpass123") as ac:
        yield ac
