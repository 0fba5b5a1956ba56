# labtrack/domains/transport/__init__.py

"""
FastAPI 애플리케이션의 'transport' 도메인 패키지입니다.

'transport' 도메인은 검체 튜브(Tube)와 온도 등급별 운송 박스(Box)를 관리합니다.
튜브 적재/하역, 박스 병합, 픽업, 배송 완료 워크플로우를 포함합니다.

주요 서브모듈:
- `models.py`: tubes, boxes 테이블과 상태/온도 Enum 정의.
- `schemas.py`: 튜브/박스 요청 및 응답 스키마.
- `crud.py`: tubes, boxes 테이블에 대한 비동기 CRUD 로직 (DatabaseStorage에서 사용).
- `routers.py`: 튜브/박스 API 엔드포인트와 상태 전이 검사.
"""

__title__ = "LabTrack Transport Domain"
__description__ = "Manages sample tubes, transport boxes and their workflow."
__version__ = "0.1.0"
__all__ = []
