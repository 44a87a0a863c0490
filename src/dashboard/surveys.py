"""Drone survey records shown on the dashboard."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class DroneSurvey:
    id: int
    name: str
    area_ha: int
    resolution_cm: int
    date: str
    ndvi: float
    coverage: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DRONE_SURVEYS: Tuple[DroneSurvey, ...] = (
    DroneSurvey(1, "Levantamento Reflorestamento", 245, 5, "2025-09-15", 0.78, "Completa"),
    DroneSurvey(2, "Monitoramento Erosão", 180, 3, "2025-09-22", 0.45, "Parcial"),
    DroneSurvey(3, "Área Urbana", 320, 8, "2025-09-28", 0.35, "Completa"),
)


def list_surveys() -> List[DroneSurvey]:
    return list(DRONE_SURVEYS)


def get_survey(survey_id: int) -> Optional[DroneSurvey]:
    return next((s for s in DRONE_SURVEYS if s.id == survey_id), None)


def total_surveyed_area() -> int:
    return sum(s.area_ha for s in DRONE_SURVEYS)
