# tests/domains/__init__.py

"""
도메인별(usr, lab, transport, shared, rpt) API 통합 테스트 패키지입니다.
"""

__title__ = "LabTrack Domain Tests"
__version__ = "0.1.0"
__all__ = []
