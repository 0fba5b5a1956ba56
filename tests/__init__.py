# tests/__init__.py

"""
LabTrack FastAPI 애플리케이션의 테스트 스위트 패키지입니다.

- `conftest.py`: 저장소(메모리/SQLite), 사용자, 인증 클라이언트 픽스처.
- `test_storage.py`: 두 저장소 구현에 공통으로 적용되는 계약 테스트.
- `domains/`: 도메인별 API 통합 테스트.
"""

__title__ = "LabTrack API Tests"
__version__ = "0.1.0"
__all__ = []
