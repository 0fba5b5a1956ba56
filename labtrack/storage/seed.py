# labtrack/storage/seed.py

"""
애플리케이션 시작 시 기본 데이터(실험실 3곳, 관리자 계정)를 생성합니다.
이미 존재하는 항목은 건너뛰므로 여러 번 실행해도 결과가 같습니다.
"""

import logging

from labtrack.core.security import get_password_hash
from labtrack.domains.lab import schemas as lab_schemas
from labtrack.domains.usr import schemas as usr_schemas
from labtrack.domains.usr.models import UserRole
from .base import IStorage

logger = logging.getLogger(__name__)

DEFAULT_LABS = [
    lab_schemas.LabCreate(name="Laboratoire A", code="LAB-A"),
    lab_schemas.LabCreate(name="Laboratoire B", code="LAB-B"),
    lab_schemas.LabCreate(name="Laboratoire C", code="LAB-C"),
]

DEFAULT_ADMIN = usr_schemas.UserBase(
    username="admin",
    name="Admin User",
    role=UserRole.ADMIN,
    barcode="EMP-001",
)


async def seed_default_data(storage: IStorage, admin_password: str) -> None:
    for lab_in in DEFAULT_LABS:
        if await storage.get_lab_by_code(lab_in.code) is None:
            await storage.create_lab(lab_in)
            logger.info("기본 실험실 생성: %s", lab_in.code)

    if await storage.get_user_by_username(DEFAULT_ADMIN.username) is None:
        await storage.create_user(DEFAULT_ADMIN, get_password_hash(admin_password))
        logger.info("기본 관리자 계정 생성: %s", DEFAULT_ADMIN.username)
