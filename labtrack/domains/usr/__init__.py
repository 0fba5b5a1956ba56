# labtrack/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

'usr' 도메인은 시스템 사용자와 인증(비밀번호 로그인, 사원증 바코드 로그인)을 담당합니다.

주요 서브모듈:
- `models.py`: users 테이블과 사용자 역할(UserRole) 정의.
- `schemas.py`: 사용자 요청/응답 및 토큰 스키마.
- `crud.py`: users 테이블에 대한 비동기 CRUD 로직.
- `routers.py`: 로그인, 로그아웃, 사용자 등록 API 엔드포인트.
"""

__title__ = "LabTrack User Domain"
__description__ = "Manages users and handles authentication."
__version__ = "0.1.0"
__all__ = []
