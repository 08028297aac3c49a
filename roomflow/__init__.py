"""
Pacote principal do roomflow.

Simulador qualitativo de qualidade do ar interno (CO2, vírus, temperatura)
em um corte 2D de uma sala, com otimizador de posição de ventilador.

Módulos:
    - config: Parâmetros do modelo e schema do cenário (JSON <-> Dataclasses).
    - field: Campo escalar 2D com amostragem bilinear.
    - environment: Fachada de geometria (sala -> grid, paredes, faixas de janela).
    - velocity: Campo de velocidade de ventiladores e janelas.
    - physics: Motor de transporte (Advecção-Difusão) e passo completo.
    - sources: Emissão dos ocupantes, ventilação e clamp.
    - model: Orquestrador da simulação (RoomAirModel).
    - optimizer: Busca aleatória de posição de ventilador.
"""

# Expõe as classes principais para acesso direto
from .config import (
    Room,
    Fan,
    Window,
    Occupant,
    OutdoorBaseline,
    RoomScenario,
    SimulationParams,
    OptimizerParams,
    AirQualityLevel,
    interpret_co2,
    create_single_occupant_scenario,
    create_classroom_scenario,
)

from .field import Field
from .physics import PhysicsEngine
from .model import RoomAirModel, simulate
from .optimizer import FanPlacementOptimizer, optimize_fan, score_stats
from .results import SimulationResult, SimulationStats, OptimizationResult

__all__ = [
    "Room",
    "Fan",
    "Window",
    "Occupant",
    "OutdoorBaseline",
    "RoomScenario",
    "SimulationParams",
    "OptimizerParams",
    "AirQualityLevel",
    "interpret_co2",
    "create_single_occupant_scenario",
    "create_classroom_scenario",
    "Field",
    "PhysicsEngine",
    "RoomAirModel",
    "simulate",
    "FanPlacementOptimizer",
    "optimize_fan",
    "score_stats",
    "SimulationResult",
    "SimulationStats",
    "OptimizationResult",
]

__version__ = "1.0.0"
