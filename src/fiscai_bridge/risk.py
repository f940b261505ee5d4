"""Compliance risk score ("velocímetro").

Four compliance checks, 25 points each. No I/O, defined for every input.
"""
from __future__ import annotations

from typing import List, Tuple

from .types import RiskAssessment

PENALTY_POINTS = 25

# (detail key, issue text) in reporting order
_CHECKS: Tuple[Tuple[str, str], ...] = (
    ("has_rfc", "RFC no registrado"),
    ("has_efirma", "e.firma no vigente"),
    ("emite_cfdi", "No emite CFDI"),
    ("declara_mensual", "No presenta declaraciones mensuales"),
)

def calculate_risk(
    has_rfc: bool,
    has_efirma: bool,
    emite_cfdi: bool,
    declara_mensual: bool,
) -> RiskAssessment:
    details = {
        "has_rfc": bool(has_rfc),
        "has_efirma": bool(has_efirma),
        "emite_cfdi": bool(emite_cfdi),
        "declara_mensual": bool(declara_mensual),
    }

    issues: List[str] = [text for key, text in _CHECKS if not details[key]]
    penalties = len(issues)

    if penalties == 0:
        level, message = "Verde", "Cumplimiento fiscal óptimo"
    elif penalties == 1:
        level, message = "Amarillo", "Cumplimiento parcial, requiere atención"
    else:
        level, message = "Rojo", "Alto riesgo fiscal, acción inmediata requerida"

    return RiskAssessment(
        score=max(0, 100 - PENALTY_POINTS * penalties),
        level=level,
        message=message,
        details=details,
        penalties=penalties,
        issues=issues,
    )
