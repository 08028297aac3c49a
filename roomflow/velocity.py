"""
Construção do campo de velocidade (vx, vy) a partir de ventiladores e janelas.

Modelo qualitativo:
- Ventilador: empurrão pseudo-radial para fora do centro,
  v += (d / (|d|² + ε)) · FAN_STRENGTH · força
- Janela: fluxo perpendicular à parede mais próxima, dentro da faixa da janela,
  v += direção · WINDOW_FLOW · abertura
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .config import Fan, SimulationParams
from .environment import Environment
from .field import Field
from .results import VelocitySample


@dataclass
class VelocityField:
    """Par de campos escalares (componentes x e y), em células por passo."""
    vx: Field
    vy: Field

    @classmethod
    def zeros(cls, rows: int, cols: int) -> 'VelocityField':
        return cls(Field(rows, cols), Field(rows, cols))

    def sample(self, x: float, y: float) -> Tuple[float, float]:
        return self.vx.sample(x, y), self.vy.sample(x, y)

    def downsample(self, stride: int) -> List[VelocitySample]:
        """Vetores a cada `stride` linhas/colunas (para desenhar setas)."""
        rows, cols = self.vx.shape
        return [
            VelocitySample(x=col, y=row, ux=self.vx[row, col], uy=self.vy[row, col])
            for row in range(0, rows, stride)
            for col in range(0, cols, stride)
        ]


def build_velocity_field(
    env: Environment,
    fans: Sequence[Fan],
    params: SimulationParams,
) -> VelocityField:
    """Reconstrói o campo de velocidade do zero (sem cache)."""
    velocity = VelocityField.zeros(env.rows, env.cols)
    vx = velocity.vx.data
    vy = velocity.vy.data

    for fan in fans:
        fx, fy = env.to_grid(fan.x, fan.y)
        dx = env.grid_x - fx
        dy = env.grid_y - fy
        d2 = dx * dx + dy * dy + params.FAN_EPSILON
        gain = params.FAN_STRENGTH * fan.strength
        vx += (dx / d2) * gain
        vy += (dy / d2) * gain

    for window in env.windows:
        band = env.velocity_band(window)
        dir_x, dir_y = window.direction
        flow = params.WINDOW_FLOW * window.open_fraction
        vx[band] += dir_x * flow
        vy[band] += dir_y * flow

    return velocity
