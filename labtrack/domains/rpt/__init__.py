# labtrack/domains/rpt/__init__.py

"""
FastAPI 애플리케이션의 'rpt' (Report) 도메인 패키지입니다.

실험실 대시보드(온도별 통계, 최근 박스, 최근 활동)를 제공합니다.
자체 테이블은 없으며, 저장소가 센 건수를 `services.py`의 함수로 응답 형태로 만듭니다.
"""

__title__ = "LabTrack Report Domain"
__version__ = "0.1.0"
__all__ = []
