"""
Estruturas de resultado da simulação e da otimização.

Os nomes dos campos são pythônicos; to_dict() produz o formato de fio
(camelCase) consumido pelo frontend: avgCO2, maxVirus, bestFan, etc.
"""

import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from .config import AirQualityLevel, Fan, interpret_co2


@dataclass
class CellState:
    co2: float
    virus: float
    temp: float


@dataclass
class VelocitySample:
    """Vetor de velocidade amostrado na célula (x = coluna, y = linha)."""
    x: int
    y: int
    ux: float
    uy: float


@dataclass
class SimulationStats:
    avg_co2: float
    max_co2: float
    avg_virus: float
    max_virus: float
    avg_temp: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'avgCO2': self.avg_co2,
            'maxCO2': self.max_co2,
            'avgVirus': self.avg_virus,
            'maxVirus': self.max_virus,
            'avgTemp': self.avg_temp,
        }


@dataclass
class SimulationResult:
    """Saída completa de uma simulação."""
    grid: List[List[CellState]]
    vectors: List[VelocitySample]
    stats: SimulationStats
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def assessment(self) -> AirQualityLevel:
        return interpret_co2(self.stats.avg_co2)

    def to_dict(self) -> Dict[str, Any]:
        level = self.assessment
        return {
            'grid': [[asdict(cell) for cell in row] for row in self.grid],
            'vectors': [asdict(v) for v in self.vectors],
            'stats': self.stats.to_dict(),
            'assessment': {'level': level.value, 'color': level.color},
            'meta': self.meta,
        }


@dataclass
class OptimizationResult:
    """Melhor ventilador encontrado pela busca aleatória."""
    best_fan: Fan
    score: float
    stats: Optional[SimulationStats]
    trials: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'bestFan': asdict(self.best_fan),
            'score': self.score if math.isfinite(self.score) else None,
            'stats': self.stats.to_dict() if self.stats is not None else None,
        }
