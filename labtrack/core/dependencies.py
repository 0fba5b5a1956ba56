# labtrack/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 한곳에서 노출하는 모듈입니다.

- 저장소 획득 (get_storage): lifespan에서 만든 app.state.storage를 반환합니다.
- 현재 인증된 사용자 정보 획득 (get_current_active_user 등).
"""

# flake8: noqa
from labtrack.storage import IStorage, get_storage
from labtrack.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    oauth2_scheme,
    get_current_user_from_token,
    get_current_active_user,
    get_current_admin_user,
)
