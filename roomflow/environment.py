"""
Módulo de Gerenciamento do Ambiente (Environment Facade).

Responsabilidade:
- Converter coordenadas da sala (unidade do editor) para coordenadas do grid.
- Inferir a parede mais próxima de cada janela e a direção do fluxo.
- Calcular as faixas de ventilação (máscaras retangulares de células).

Padrão de Projeto: Facade / Service Layer.
A física e as fontes consultam esta classe, não a geometria bruta.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

from .config import RoomScenario, SimulationParams, Window

logger = logging.getLogger(__name__)


class Wall(str, Enum):
    """Paredes na ordem de desempate (esquerda tem prioridade)."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


# Direção do fluxo (unitária) para cada parede: sempre para dentro da sala
WALL_DIRECTIONS = {
    Wall.LEFT: (1.0, 0.0),
    Wall.RIGHT: (-1.0, 0.0),
    Wall.TOP: (0.0, 1.0),
    Wall.BOTTOM: (0.0, -1.0),
}


@dataclass(frozen=True)
class WindowGeometry:
    """Janela já projetada no grid."""
    grid_x: float
    grid_y: float
    half_width: float  # em colunas
    wall: Wall
    open_fraction: float

    @property
    def direction(self) -> Tuple[float, float]:
        return WALL_DIRECTIONS[self.wall]


class Environment:
    """
    Fachada que gerencia a relação espacial entre sala e grid.
    O grid tem dimensões fixas; a sala é apenas escalada sobre ele.
    """

    def __init__(self, scenario: RoomScenario, params: SimulationParams):
        self.scenario = scenario
        self.params = params
        self.rows = params.ROWS
        self.cols = params.COLS
        self.width = scenario.room.width
        self.height = scenario.room.height

        # Coordenadas de cada célula (x = coluna, y = linha)
        self.grid_y, self.grid_x = np.indices((self.rows, self.cols), dtype=np.float64)

        self.windows = [self._project_window(w) for w in scenario.windows]

        logger.debug(
            f"Ambiente: sala {self.width:g}x{self.height:g} -> grid {self.rows}x{self.cols}, "
            f"{len(self.windows)} janela(s)"
        )

    # ========================================================================
    # CONVERSÃO DE COORDENADAS
    # ========================================================================

    def to_grid_x(self, x: float) -> float:
        return (x / self.width) * (self.cols - 1)

    def to_grid_y(self, y: float) -> float:
        return (y / self.height) * (self.rows - 1)

    def to_grid(self, x: float, y: float) -> Tuple[float, float]:
        """Converte coordenadas da sala para coordenadas fracionárias do grid."""
        return self.to_grid_x(x), self.to_grid_y(y)

    def to_room(self, gx: float, gy: float) -> Tuple[float, float]:
        """Inverso de to_grid()."""
        return (gx / (self.cols - 1)) * self.width, (gy / (self.rows - 1)) * self.height

    def squared_distance_from(self, gx: float, gy: float) -> np.ndarray:
        """d² (em células) de cada célula até o ponto (gx, gy)."""
        dx = self.grid_x - gx
        dy = self.grid_y - gy
        return dx * dx + dy * dy

    # ========================================================================
    # JANELAS
    # ========================================================================

    def nearest_wall(self, x: float, y: float) -> Wall:
        """
        Parede mais próxima do ponto (coordenadas da sala).
        Empates seguem a ordem esquerda -> direita -> topo -> base.
        """
        distances = (
            (Wall.LEFT, x),
            (Wall.RIGHT, self.width - x),
            (Wall.TOP, y),
            (Wall.BOTTOM, self.height - y),
        )
        nearest = min(d for _, d in distances)
        for wall, d in distances:
            if d == nearest:
                return wall
        return Wall.BOTTOM

    def _project_window(self, window: Window) -> WindowGeometry:
        return WindowGeometry(
            grid_x=self.to_grid_x(window.x),
            grid_y=self.to_grid_y(window.y),
            half_width=(window.width / self.width) * (self.cols - 1) * 0.5,
            wall=self.nearest_wall(window.x, window.y),
            open_fraction=window.open_fraction,
        )

    def window_band(self, window: WindowGeometry, half_height: float) -> np.ndarray:
        """
        Máscara booleana (rows x cols) da faixa retangular em torno da janela.
        A faixa é sempre horizontal, qualquer que seja a parede.
        """
        return (
            (np.abs(self.grid_x - window.grid_x) <= window.half_width)
            & (np.abs(self.grid_y - window.grid_y) <= half_height)
        )

    def velocity_band(self, window: WindowGeometry) -> np.ndarray:
        return self.window_band(window, self.params.VELOCITY_BAND_HALF_HEIGHT)

    def ventilation_band(self, window: WindowGeometry) -> np.ndarray:
        return self.window_band(window, self.params.VENT_BAND_HALF_HEIGHT)
