"""
Fontes e Sumidouros (Termos 'S' e de troca com o exterior).

- Emissão dos ocupantes: bolha gaussiana exp(-d²/falloff) sobre todo o grid
  (sem truncamento da cauda), escalada pela intensidade e pela taxa de cada campo.
- Ventilação: dentro da faixa de cada janela, puxa os campos para a linha de
  base externa: C = lerp(C, C_ext, VENT_PULL · abertura). Temperatura a 0.8x.
- Clamp: única proteção contra acúmulo descontrolado, aplicado a todo passo.
"""

from typing import Sequence

import numpy as np

from .config import Occupant, OutdoorBaseline, SimulationParams
from .environment import Environment
from .field import Field


def _lerp_masked(grid: np.ndarray, mask: np.ndarray, target: float, t: float):
    """grid[mask] = lerp(grid[mask], target, t), in-place."""
    values = grid[mask]
    grid[mask] = values + (target - values) * t


def apply_occupant_emissions(
    env: Environment,
    occupants: Sequence[Occupant],
    co2: Field,
    virus: Field,
    temp: Field,
    params: SimulationParams,
):
    """Soma a contribuição gaussiana de cada ocupante aos três campos (in-place)."""
    for occupant in occupants:
        px, py = env.to_grid(occupant.x, occupant.y)
        weight = np.exp(-env.squared_distance_from(px, py) / params.EMISSION_FALLOFF)

        co2.data[...] += params.CO2_EMIT * occupant.intensity * weight
        virus.data[...] += params.VIRUS_EMIT * occupant.intensity * weight
        temp.data[...] += params.HEAT_EMIT * occupant.intensity * weight


def apply_ventilation(
    env: Environment,
    outdoor: OutdoorBaseline,
    co2: Field,
    virus: Field,
    temp: Field,
    params: SimulationParams,
):
    """Troca com o ar externo perto das janelas (in-place)."""
    for window in env.windows:
        band = env.ventilation_band(window)
        if not band.any():
            continue

        k = params.VENT_PULL * window.open_fraction
        _lerp_masked(co2.data, band, outdoor.co2, k)
        _lerp_masked(virus.data, band, outdoor.virus, k)
        _lerp_masked(temp.data, band, outdoor.temp, k * params.TEMP_PULL_RATIO)


def clamp_fields(
    co2: Field,
    virus: Field,
    temp: Field,
    outdoor: OutdoorBaseline,
    params: SimulationParams,
):
    """
    Prende os campos às faixas físicas: max(lo, min(v, hi)).
    Se lo > hi (CO2 externo acima do teto), prevalece lo.
    """
    for grid, low, high in (
        (co2.flat, outdoor.co2, params.CO2_MAX),
        (virus.flat, 0.0, params.VIRUS_MAX),
        (temp.flat, params.TEMP_MIN, params.TEMP_MAX),
    ):
        np.minimum(grid, high, out=grid)
        np.maximum(grid, low, out=grid)
