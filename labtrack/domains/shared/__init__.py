# labtrack/domains/shared/__init__.py

"""
FastAPI 애플리케이션의 'shared' 도메인 패키지입니다.

여러 도메인에서 공통으로 사용하는 알림(Alert)과 활동 기록(Activity)을 관리합니다.

주요 서브모듈:
- `models.py`: alerts, activities 테이블 정의.
- `schemas.py`: 알림/활동 기록 요청 및 응답 스키마.
- `crud.py`: 비동기 CRUD 로직.
- `services.py`: 라우터가 사용하는 활동 기록 헬퍼.
- `routers.py`: 알림/활동 기록 API 엔드포인트.
"""

__title__ = "LabTrack Shared Domain"
__version__ = "0.1.0"
__all__ = []
