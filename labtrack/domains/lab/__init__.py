# labtrack/domains/lab/__init__.py

"""
FastAPI 애플리케이션의 'lab' 도메인 패키지입니다.

튜브, 박스, 알림, 활동 기록은 모두 하나의 실험실(Lab)에 소속됩니다.
"""

__title__ = "LabTrack Lab Domain"
__version__ = "0.1.0"
__all__ = []
