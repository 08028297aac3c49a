"""
Orquestrador da Simulação (RoomAirModel).

Responsabilidade:
- Integrar Configuração, Ambiente e Física.
- Gerenciar o loop de passos: INICIALIZAR -> (PASSO) x STEPS -> AGREGAR.
- Coletar métricas por passo e empacotar o resultado final.

O modelo é determinístico: entradas idênticas produzem saídas idênticas.
"""

import logging
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from .config import RoomScenario, SimulationParams
from .physics import PhysicsEngine
from .results import CellState, SimulationResult, SimulationStats

logger = logging.getLogger(__name__)


class RoomAirModel:
    """
    Modelo de qualidade do ar de uma sala com ventiladores, janelas e ocupantes.
    Uma instância por chamada; não reutilize entre cenários.
    """

    def __init__(self, scenario: RoomScenario, params: Optional[SimulationParams] = None):
        """
        Args:
            scenario: Cenário saneado (ver RoomScenario.from_dict).
            params: Constantes do modelo. Default: SimulationParams().
        """
        self.scenario = scenario
        self.params = params or SimulationParams()
        self.step_count = 0
        self.running = True

        self.physics = PhysicsEngine(scenario, self.params)
        self.metrics_history: List[Dict[str, Any]] = []

        logger.info(
            f"Modelo inicializado: sala {scenario.room.width:g}x{scenario.room.height:g}, "
            f"{self.params.STEPS} passos"
        )

    def step(self):
        """Executa um passo de física e registra as métricas."""
        self.physics.step()
        self.step_count += 1
        self._update_metrics()

        if self.step_count >= self.params.STEPS:
            self.running = False

    def run(self) -> SimulationResult:
        """Roda todos os passos restantes e agrega o resultado."""
        while self.running and self.step_count < self.params.STEPS:
            self.step()
        self.running = False

        result = self.get_result()
        logger.info(
            f"Simulação concluída ({self.step_count} passos): "
            f"CO2 médio {result.stats.avg_co2:.0f} ppm, vírus máx {result.stats.max_virus:.2f}"
        )
        return result

    def _update_metrics(self):
        """Calcula estatísticas do passo atual e salva no histórico."""
        stats = self.get_stats()
        metric = {
            "step": self.step_count,
            "avg_co2": stats.avg_co2,
            "max_co2": stats.max_co2,
            "avg_virus": stats.avg_virus,
            "max_virus": stats.max_virus,
            "avg_temp": stats.avg_temp,
        }
        self.metrics_history.append(metric)
        logger.debug(
            f"Passo {self.step_count}: CO2 {stats.avg_co2:.1f} (máx {stats.max_co2:.1f}), "
            f"vírus {stats.avg_virus:.3f}, T {stats.avg_temp:.2f}"
        )

    # ========================================================================
    # AGREGAÇÃO
    # ========================================================================

    def get_stats(self) -> SimulationStats:
        ph = self.physics
        return SimulationStats(
            avg_co2=ph.co2.mean(),
            max_co2=ph.co2.max(),
            avg_virus=ph.virus.mean(),
            max_virus=ph.virus.max(),
            avg_temp=ph.temp.mean(),
        )

    def get_result(self) -> SimulationResult:
        """Empacota o grid por célula, os vetores amostrados e as estatísticas."""
        ph = self.physics
        co2, virus, temp = ph.co2.data, ph.virus.data, ph.temp.data

        grid = [
            [
                CellState(co2=float(co2[r, c]), virus=float(virus[r, c]), temp=float(temp[r, c]))
                for c in range(self.params.COLS)
            ]
            for r in range(self.params.ROWS)
        ]

        return SimulationResult(
            grid=grid,
            vectors=ph.velocity.downsample(self.params.VECTOR_STRIDE),
            stats=self.get_stats(),
            meta={
                "rows": self.params.ROWS,
                "cols": self.params.COLS,
                "steps": self.step_count,
                "outdoor": {"co2": self.scenario.outdoor.co2, "temp": self.scenario.outdoor.temp},
                "usedDefaultDimensions": self.scenario.used_default_dimensions,
            },
        )

    def get_metrics_dataframe(self) -> pd.DataFrame:
        """Exporta o histórico de métricas como DataFrame do Pandas."""
        return pd.DataFrame(self.metrics_history)

    def get_field_arrays(self) -> Dict[str, np.ndarray]:
        return self.physics.get_snapshot()


def simulate(scenario: RoomScenario, params: Optional[SimulationParams] = None) -> SimulationResult:
    """Ponto de entrada: roda uma simulação completa do cenário."""
    return RoomAirModel(scenario, params).run()
