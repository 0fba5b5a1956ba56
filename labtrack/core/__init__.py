# labtrack/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

- `config.py`: 애플리케이션 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 비동기 엔진, 세션 공장, 트랜잭션 컨텍스트.
- `crud_base.py`: SQLModel 공통 CRUD 기본 클래스.
- `security.py`: 비밀번호 해싱, JWT 발급/검증, 현재 사용자 획득.
- `dependencies.py`: 저장소 주입 등 공통 의존성 함수.
"""

__title__ = "LabTrack Core"
__version__ = "0.1.0"
__all__ = []
