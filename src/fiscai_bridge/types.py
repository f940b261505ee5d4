"""Shared types and lightweight data containers.

We avoid heavy frameworks here. The goal is:
- keep the Lambda package small and portable
- keep typing clear but not over-abstract
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Union

# Untrusted upstream payloads are always handled as this union.
JsonValue = Union[str, int, float, bool, None, List["JsonValue"], Dict[str, "JsonValue"]]

RiskLevel = Literal["Verde", "Amarillo", "Rojo"]

def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

@dataclass
class FiscalProfile:
    actividad: str
    ingresos_anuales: float = 0.0
    empleados: int = 0
    metodos_pago: List[str] = field(default_factory=list)
    estado: str = "No especificado"
    has_rfc: bool = False
    has_efirma: bool = False
    emite_cfdi: bool = False
    declara_mensual: bool = False
    regimen_actual: Optional[str] = None
    contexto_adicional: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        # pass-through fields only travel upstream, they are not echoed
        d = asdict(self)
        d.pop("regimen_actual")
        d.pop("contexto_adicional")
        return d

@dataclass
class RiskAssessment:
    score: int
    level: RiskLevel
    message: str
    details: Dict[str, bool]
    penalties: int
    issues: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class SourceDocument:
    title: str = "Documento fiscal"
    scope: str = "General"
    url: str = "Libro"
    similarity: float = 0.8

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class RecommendationResponse:
    profile: FiscalProfile
    risk: RiskAssessment
    recommendation: str
    sources: List[SourceDocument]
    timestamp: str = field(default_factory=utc_timestamp)
    success: bool = True

    @property
    def matches_count(self) -> int:
        return len(self.sources)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "profile": self.profile.to_dict(),
            "risk": self.risk.to_dict(),
            "recommendation": self.recommendation,
            "sources": [s.to_dict() for s in self.sources],
            "matches_count": self.matches_count,
            "timestamp": self.timestamp,
        }
