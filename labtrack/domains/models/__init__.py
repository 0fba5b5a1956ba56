# labtrack/domains/models/__init__.py

"""
모든 도메인의 SQLModel 모델을 한 곳에서 임포트하여
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다.
"""

# usr (User, UserRole)
from labtrack.domains.usr.models import User, UserRole

# lab (Lab)
from labtrack.domains.lab.models import Lab

# transport (Tube, Box 및 상태/온도 Enum)
from labtrack.domains.transport.models import Tube, Box, TemperatureType, TubeStatus, BoxStatus

# shared (Alert, Activity)
from labtrack.domains.shared.models import Alert, AlertSeverity, Activity

__all__ = [
    "User", "UserRole",
    "Lab",
    "Tube", "Box", "TemperatureType", "TubeStatus", "BoxStatus",
    "Alert", "AlertSeverity", "Activity",
]
