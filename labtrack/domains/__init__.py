# labtrack/domains/__init__.py

"""
업무 도메인 패키지입니다.

- `usr`: 사용자와 인증.
- `lab`: 실험실(사이트) 기준 정보.
- `transport`: 검체 튜브와 운송 박스, 적재/병합/픽업/배송 워크플로우.
- `shared`: 알림(Alert)과 활동 기록(Activity).
- `rpt`: 실험실 대시보드 집계.
"""
