# labtrack/domains/usr/routers.py

"""
'usr' 도메인 (사용자 및 인증)과 관련된 API 엔드포인트를 정의하는 모듈입니다.

로그인에 성공하면 토큰을 응답 본문으로 돌려주고, 같은 토큰을 HttpOnly 쿠키에도 설정합니다.
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from labtrack.core.config import settings
from labtrack.core import dependencies as deps
from labtrack.core.security import ACCESS_TOKEN_COOKIE

from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Authentication (사용자 인증)"],
    responses={404: {"description": "Not found"}},
)


def _issue_token(response: Response, user: usr_models.User) -> usr_schemas.Token:
    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = deps.create_access_token(data={"sub": str(user.id)}, expires_delta=expires)
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        access_token,
        max_age=int(expires.total_seconds()),
        httponly=True,
        samesite="lax",
    )
    logger.info("로그인: %s (ID: %s)", user.username, user.id)
    return usr_schemas.Token(access_token=access_token, token_type="bearer")


# =============================================================================
# 1. 로그인 / 로그아웃
# =============================================================================
@router.post("/auth/token", response_model=usr_schemas.Token, summary="Access Token 획득")
async def login_for_access_token(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    storage: deps.IStorage = Depends(deps.get_storage),
):
    user = await storage.get_user_by_username(form_data.username)
    if not user or not deps.verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return _issue_token(response, user)


@router.post("/auth/badge", response_model=usr_schemas.Token, summary="사원증 바코드로 로그인")
async def login_with_badge(
    badge_in: usr_schemas.BadgeLogin,
    response: Response,
    storage: deps.IStorage = Depends(deps.get_storage),
):
    """사원증 바코드를 스캔하여 로그인합니다. BADGE_LOGIN_ENABLED 설정으로 끌 수 있습니다."""
    if not settings.BADGE_LOGIN_ENABLED:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Badge login is disabled")

    user = await storage.get_user_by_barcode(badge_in.barcode)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown badge",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return _issue_token(response, user)


@router.post("/auth/logout", summary="로그아웃")
async def logout(response: Response):
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return {"message": "Logged out"}


# =============================================================================
# 2. 사용자 등록 및 조회
# =============================================================================
@router.post(
    "/auth/register",
    response_model=usr_schemas.UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="새 사용자 등록",
)
async def register_user(
    user_in: usr_schemas.UserCreate,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """새 사용자를 등록합니다. 관리자 권한이 필요합니다."""
    if await storage.get_user_by_username(user_in.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
    if await storage.get_user_by_barcode(user_in.barcode):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Badge barcode already exists")

    return await storage.create_user(user_in, deps.get_password_hash(user_in.password))


@router.get("/auth/me", response_model=usr_schemas.UserResponse, summary="현재 사용자 정보 조회")
async def read_users_me(current_user: usr_models.User = Depends(deps.get_current_active_user)):
    return current_user


@router.patch("/users/{user_id}", response_model=usr_schemas.UserResponse, summary="사용자 정보 수정")
async def update_user(
    user_id: int,
    user_in: usr_schemas.UserUpdate,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """
    이름, 역할, 사원증 바코드를 수정합니다.
    본인 또는 관리자만 수정할 수 있으며, 역할 변경은 관리자만 가능합니다.
    """
    is_admin = current_user.role == usr_models.UserRole.ADMIN
    if current_user.id != user_id and not is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")

    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if user_in.role is not None and user_in.role != user.role and not is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Admin role required to change roles.",
        )
    if user_in.barcode is not None and user_in.barcode != user.barcode:
        if await storage.get_user_by_barcode(user_in.barcode):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Badge barcode already exists")

    return await storage.update_user(user_id, user_in)
