"""
Motor de Física (modelo qualitativo) para Transporte de CO2, Vírus e Temperatura.

Responsabilidade:
- Gerenciar os campos escalares (CO2, Vírus, Temperatura).
- Transporte: Advecção semi-Lagrangiana seguida de Difusão.
- Aplicar fontes (ocupantes), sumidouros (janelas) e clamp a cada passo.

Ordem de um passo (Operator Splitting):
    1. Reconstruir campo de velocidade (ventiladores + janelas).
    2. Advecção dos três campos.
    3. Difusão dos três campos.
    4. Fontes (ocupantes).
    5. Sumidouros (ventilação).
    6. Clamp.

Dependências:
- numpy: Operações vetorizadas sobre o grid.
- scipy.ndimage: Convolução para a média dos 4 vizinhos.
"""

import logging
from typing import Dict

import numpy as np
from scipy.ndimage import convolve

from .config import RoomScenario, SimulationParams
from .environment import Environment
from .field import Field
from .sources import apply_occupant_emissions, apply_ventilation, clamp_fields
from .velocity import VelocityField, build_velocity_field

logger = logging.getLogger(__name__)

# Média dos 4 vizinhos ortogonais
_NEIGHBOR_KERNEL = np.array(
    [[0.0, 0.25, 0.0],
     [0.25, 0.0, 0.25],
     [0.0, 0.25, 0.0]],
    dtype=np.float64,
)


def advect(field: Field, velocity: VelocityField, advect_factor: float) -> Field:
    """
    Advecção semi-Lagrangiana: cada célula recebe o valor amostrado no ponto
    de onde o ar veio, (x - vx·ADVECT, y - vy·ADVECT).
    Incondicionalmente estável (custo: suavização numérica).
    """
    rows, cols = field.shape
    ys, xs = np.indices((rows, cols), dtype=np.float64)
    back_x = xs - velocity.vx.data * advect_factor
    back_y = ys - velocity.vy.data * advect_factor
    return Field.from_array(field.sample_many(back_x, back_y))


def diffuse(field: Field, diff: float) -> Field:
    """
    Mistura turbulenta: lerp(C, média dos vizinhos, DIFF).
    mode='nearest' replica a borda -> vizinhos presos ao grid, sem wraparound.
    """
    grid = field.data
    neighbor_avg = convolve(grid, _NEIGHBOR_KERNEL, mode='nearest')
    return Field.from_array(grid + (neighbor_avg - grid) * diff)


class PhysicsEngine:
    """
    Solver dos três campos escalares em grid 2D fixo.
    Uma instância por simulação (sem estado compartilhado).
    """

    def __init__(self, scenario: RoomScenario, params: SimulationParams):
        """
        Inicializa os campos com as condições semeadas.

        Args:
            scenario: Cenário saneado (sala, ventiladores, janelas, ocupantes).
            params: Constantes de ajuste do modelo.
        """
        self.scenario = scenario
        self.params = params
        self.environment = Environment(scenario, params)
        self.outdoor = scenario.outdoor

        rows, cols = params.ROWS, params.COLS

        # --- Campos Escalares (Estados) ---
        # CO2 (ppm) começa moderadamente elevado em relação ao exterior
        self.co2 = Field(rows, cols, self.outdoor.co2 + params.INITIAL_CO2_OFFSET)
        self.virus = Field(rows, cols, 0.0)
        self.temp = Field(rows, cols, params.ROOM_TEMP)

        # Campo de velocidade do último passo (ou o inicial, se STEPS = 0)
        self.velocity = self.compute_velocity()

        logger.debug(
            f"Physics Engine iniciado: {rows}x{cols} células, "
            f"{len(scenario.fans)} ventilador(es), {len(scenario.windows)} janela(s), "
            f"{len(scenario.occupants)} ocupante(s)"
        )

    def compute_velocity(self) -> VelocityField:
        return build_velocity_field(self.environment, self.scenario.fans, self.params)

    def step(self):
        """Executa um passo completo (ver ordem no docstring do módulo)."""
        p = self.params

        # 1. Velocidade é reconstruída a todo passo
        self.velocity = self.compute_velocity()

        # 2-3. Transporte
        self.co2 = advect(self.co2, self.velocity, p.ADVECT)
        self.virus = advect(self.virus, self.velocity, p.ADVECT)
        self.temp = advect(self.temp, self.velocity, p.ADVECT)

        self.co2 = diffuse(self.co2, p.DIFF)
        self.virus = diffuse(self.virus, p.DIFF)
        self.temp = diffuse(self.temp, p.DIFF)

        # 4. Fontes
        apply_occupant_emissions(
            self.environment, self.scenario.occupants,
            self.co2, self.virus, self.temp, p,
        )

        # 5. Sumidouros
        apply_ventilation(
            self.environment, self.outdoor,
            self.co2, self.virus, self.temp, p,
        )

        # 6. Segurança numérica
        clamp_fields(self.co2, self.virus, self.temp, self.outdoor, p)

    # ========================================================================
    # API DE DADOS
    # ========================================================================

    def get_snapshot(self) -> Dict[str, np.ndarray]:
        """Cópias seguras dos três campos (para visualização)."""
        return {
            'co2': self.co2.data.copy(),
            'virus': self.virus.data.copy(),
            'temp': self.temp.data.copy(),
        }
