"""
Gráficos estáticos (PNG) para uso sem interface gráfica.
"""

import os
import logging

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')  # Backend não-interativo para evitar erros de display
import matplotlib.pyplot as plt

from .results import SimulationResult

logger = logging.getLogger(__name__)


def result_to_arrays(result: SimulationResult):
    """Converte o grid por célula de volta em matrizes (co2, vírus, temp)."""
    co2 = np.array([[cell.co2 for cell in row] for row in result.grid])
    virus = np.array([[cell.virus for cell in row] for row in result.grid])
    temp = np.array([[cell.temp for cell in row] for row in result.grid])
    return co2, virus, temp


def plot_result(result: SimulationResult, path: str) -> str:
    """Mapas de calor de CO2, vírus e temperatura com as setas do escoamento."""
    co2, virus, temp = result_to_arrays(result)

    xs = [v.x for v in result.vectors]
    ys = [v.y for v in result.vectors]
    us = [v.ux for v in result.vectors]
    vs = [v.uy for v in result.vectors]

    fig, axes = plt.subplots(1, 3, figsize=(16, 4))
    panels = (
        (co2, 'CO₂ (ppm)', 'YlOrRd'),
        (virus, 'Vírus (u.a.)', 'Purples'),
        (temp, 'Temperatura (°C)', 'coolwarm'),
    )
    for ax, (data, title, cmap) in zip(axes, panels):
        im = ax.imshow(data, origin='upper', cmap=cmap, aspect='auto')
        # Eixo y do grid cresce para baixo, como no editor
        ax.quiver(xs, ys, us, [-v for v in vs], color='black', alpha=0.6)
        ax.set_title(title)
        ax.set_xticks([])
        ax.set_yticks([])
        fig.colorbar(im, ax=ax, fraction=0.046)

    stats = result.stats
    fig.suptitle(
        f"CO₂ médio {stats.avg_co2:.0f} ppm ({result.assessment.value}) | "
        f"vírus máx {stats.max_virus:.2f} | T média {stats.avg_temp:.1f} °C"
    )
    plt.tight_layout()

    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    plt.savefig(path, dpi=150)
    plt.close(fig)
    logger.info(f"Gráfico salvo: {path}")
    return path


def plot_history(history: pd.DataFrame, path: str, x: str = 'step') -> str:
    """Curvas de CO2 médio e vírus médio ao longo dos passos (ou tentativas)."""
    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

    ax1.plot(history[x], history['avg_co2'], color='tab:orange', label='CO₂ Médio')
    ax1.plot(history[x], history['max_co2'], color='tab:red', alpha=0.5, label='CO₂ Máximo')
    ax1.set_ylabel('Concentração (ppm)')
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    ax2.plot(history[x], history['avg_virus'], color='tab:purple', label='Vírus Médio')
    ax2.plot(history[x], history['max_virus'], color='tab:pink', alpha=0.5, label='Vírus Máximo')
    ax2.set_xlabel(x)
    ax2.legend()
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    plt.savefig(path, dpi=150)
    plt.close(fig)
    logger.info(f"Gráfico salvo: {path}")
    return path
