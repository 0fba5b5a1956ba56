# labtrack/__init__.py

"""
LabTrack FastAPI 애플리케이션의 메인 패키지입니다.

검체 튜브(Tube)의 바코드 등록, 온도 등급별 운송 박스(Box) 적재,
운송자 픽업/배송 추적, 실험실별 대시보드와 알림을 제공합니다.

- `core`: 설정, 데이터베이스, 보안, 공통 의존성.
- `storage`: 저장소 인터페이스(IStorage)와 메모리/데이터베이스 구현.
- `domains`: 업무 도메인별 모델, 스키마, CRUD, 라우터.
"""

APP_NAME = "LabTrack API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Laboratory sample tube & transport box tracking API backend."
__all__ = []
