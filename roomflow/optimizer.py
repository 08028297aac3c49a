"""
Otimizador de Posição de Ventilador (Busca Aleatória).

Estratégia:
    Para um número fixo de tentativas, sorteia uma posição uniforme dentro da
    sala (força fixa), roda a simulação completa com esse único ventilador
    e calcula o score:

        score = 1.0·(CO2 médio/1200) + 0.6·(CO2 máx/2500)
              + 1.2·(vírus médio/8) + 0.9·(vírus máx/25)
              + 0.15·|T média - 21|

    Mantém o menor score (comparação estrita: em empate, vence a primeira
    tentativa). Sem recozimento, sem reinícios, sem critério de convergência.

Reprodutibilidade:
    O gerador (numpy.random.Generator) é injetável. Todas as posições são
    sorteadas antes da avaliação, na ordem das tentativas, de modo que a
    avaliação em paralelo produz exatamente o mesmo resultado da sequencial.
"""

import logging
import math
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from .config import Fan, OptimizerParams, RoomScenario, SimulationParams
from .model import simulate
from .results import OptimizationResult, SimulationStats

logger = logging.getLogger(__name__)


def score_stats(stats: SimulationStats, params: OptimizerParams = OptimizerParams()) -> float:
    """Função objetivo (menor é melhor)."""
    heat_penalty = abs(stats.avg_temp - params.COMFORT_TEMP)
    return (
        (stats.avg_co2 / params.AVG_CO2_REF) * params.AVG_CO2_WEIGHT
        + (stats.max_co2 / params.MAX_CO2_REF) * params.MAX_CO2_WEIGHT
        + (stats.avg_virus / params.AVG_VIRUS_REF) * params.AVG_VIRUS_WEIGHT
        + (stats.max_virus / params.MAX_VIRUS_REF) * params.MAX_VIRUS_WEIGHT
        + heat_penalty * params.TEMP_PENALTY_WEIGHT
    )


def _evaluate_candidate(job) -> SimulationStats:
    """Avalia um ventilador candidato (nível de módulo para ser picklável)."""
    scenario, fan, sim_params = job
    return simulate(scenario.with_fans([fan]), sim_params).stats


class FanPlacementOptimizer:
    """Busca aleatória pelo ventilador que minimiza o score."""

    def __init__(
        self,
        params: Optional[OptimizerParams] = None,
        sim_params: Optional[SimulationParams] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        n_workers: int = 1,
    ):
        """
        Args:
            params: Número de tentativas e pesos do score.
            sim_params: Constantes repassadas a cada simulação.
            rng: Gerador explícito (tem precedência sobre seed).
            seed: Semente para numpy.random.default_rng (None = entropia do SO).
            n_workers: >1 avalia as tentativas em processos paralelos.
        """
        self.params = params or OptimizerParams()
        self.sim_params = sim_params or SimulationParams()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.n_workers = max(1, int(n_workers))
        self.trials_history: List[Dict[str, Any]] = []

    def sample_candidates(self, scenario: RoomScenario) -> List[Fan]:
        """Sorteia as posições de todas as tentativas (x e depois y, por tentativa)."""
        width, height = scenario.room.width, scenario.room.height
        candidates = []
        for _ in range(self.params.TRIALS):
            x = self.rng.random() * width
            y = self.rng.random() * height
            candidates.append(Fan(x=float(x), y=float(y), strength=self.params.TRIAL_FAN_STRENGTH))
        return candidates

    def _evaluate_all(self, scenario: RoomScenario, candidates: List[Fan]) -> List[SimulationStats]:
        jobs = [(scenario, fan, self.sim_params) for fan in candidates]
        if self.n_workers > 1 and len(jobs) > 1:
            # map() preserva a ordem das tentativas
            with ProcessPoolExecutor(max_workers=self.n_workers) as executor:
                return list(executor.map(_evaluate_candidate, jobs))
        return [_evaluate_candidate(job) for job in jobs]

    def optimize(self, scenario: RoomScenario) -> OptimizationResult:
        """
        Roda todas as tentativas e devolve a melhor.
        Os ventiladores do cenário de entrada são ignorados.
        """
        room = scenario.room
        best_fan = Fan(x=room.width / 2, y=room.height / 2, strength=self.params.TRIAL_FAN_STRENGTH)
        best_score = math.inf
        best_stats: Optional[SimulationStats] = None
        best_index = None

        logger.info(
            f"Otimização iniciada: {self.params.TRIALS} tentativas, "
            f"{self.n_workers} worker(s)"
        )

        candidates = self.sample_candidates(scenario)
        all_stats = self._evaluate_all(scenario, candidates)

        self.trials_history = []
        for i, (fan, stats) in enumerate(zip(candidates, all_stats)):
            score = score_stats(stats, self.params)
            if score < best_score:
                best_score = score
                best_fan = fan
                best_stats = stats
                best_index = i
                logger.debug(f"Tentativa {i}: novo melhor score {score:.4f} em ({fan.x:.1f}, {fan.y:.1f})")

            self.trials_history.append({
                "trial": i,
                "x": fan.x,
                "y": fan.y,
                "strength": fan.strength,
                "score": score,
                "best_score": best_score,
                "avg_co2": stats.avg_co2,
                "max_co2": stats.max_co2,
                "avg_virus": stats.avg_virus,
                "max_virus": stats.max_virus,
                "avg_temp": stats.avg_temp,
            })

        for row in self.trials_history:
            row["is_best"] = row["trial"] == best_index

        rounded = round(best_score, self.params.SCORE_DECIMALS) if math.isfinite(best_score) else best_score
        logger.info(
            f"Otimização concluída: melhor ventilador em ({best_fan.x:.1f}, {best_fan.y:.1f}), "
            f"score {rounded}"
        )

        return OptimizationResult(
            best_fan=best_fan,
            score=rounded,
            stats=best_stats,
            trials=len(candidates),
        )

    def get_trials_dataframe(self) -> pd.DataFrame:
        """Histórico de tentativas como DataFrame do Pandas."""
        return pd.DataFrame(self.trials_history)


def optimize_fan(
    scenario: RoomScenario,
    params: Optional[OptimizerParams] = None,
    sim_params: Optional[SimulationParams] = None,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    n_workers: int = 1,
) -> OptimizationResult:
    """Ponto de entrada: busca aleatória pelo melhor ventilador único."""
    optimizer = FanPlacementOptimizer(
        params=params, sim_params=sim_params, rng=rng, seed=seed, n_workers=n_workers,
    )
    return optimizer.optimize(scenario)
