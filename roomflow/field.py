"""
Campo escalar 2D de tamanho fixo.

Armazenamento em um único buffer contíguo (row-major, índice = linha * cols + coluna),
exposto como visão 2D do numpy. Amostragem bilinear com clamp nas bordas.
"""

from typing import Tuple

import numpy as np


class Field:
    """Grid escalar (linhas x colunas) com amostragem bilinear."""

    def __init__(self, rows: int, cols: int, fill: float = 0.0):
        self.rows = rows
        self.cols = cols
        self._buffer = np.full(rows * cols, fill, dtype=np.float64)

    @classmethod
    def from_array(cls, values: np.ndarray) -> 'Field':
        """Cria um campo copiando uma matriz 2D."""
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(f"Esperado array 2D, recebido shape {values.shape}")
        rows, cols = values.shape
        out = cls(rows, cols)
        out._buffer[:] = values.ravel()
        return out

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def data(self) -> np.ndarray:
        """Visão 2D (sem cópia) do buffer. Escritas alteram o campo."""
        return self._buffer.reshape(self.rows, self.cols)

    @property
    def flat(self) -> np.ndarray:
        return self._buffer

    def __getitem__(self, index: Tuple[int, int]) -> float:
        row, col = index
        return float(self._buffer[row * self.cols + col])

    def __setitem__(self, index: Tuple[int, int], value: float):
        row, col = index
        self._buffer[row * self.cols + col] = value

    def copy(self) -> 'Field':
        out = Field(self.rows, self.cols)
        out._buffer[:] = self._buffer
        return out

    def mean(self) -> float:
        return float(self._buffer.mean())

    def max(self) -> float:
        return float(self._buffer.max())

    def min(self) -> float:
        return float(self._buffer.min())

    # ========================================================================
    # AMOSTRAGEM BILINEAR
    # ========================================================================

    def sample(self, x: float, y: float) -> float:
        """
        Amostra o campo na coordenada fracionária (x = coluna, y = linha).

        Coordenadas fora do grid são presas à borda; o vizinho +1 é preso ao
        último índice válido (sem wraparound). Em coordenadas inteiras o valor
        armazenado é reproduzido exatamente.
        """
        return float(self.sample_many(np.asarray([x]), np.asarray([y]))[0])

    def sample_many(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Versão vetorizada de sample(); xs e ys com o mesmo shape."""
        xs = np.clip(np.asarray(xs, dtype=np.float64), 0, self.cols - 1)
        ys = np.clip(np.asarray(ys, dtype=np.float64), 0, self.rows - 1)

        x0 = np.floor(xs).astype(np.intp)
        y0 = np.floor(ys).astype(np.intp)
        x1 = np.minimum(x0 + 1, self.cols - 1)
        y1 = np.minimum(y0 + 1, self.rows - 1)

        tx = xs - x0
        ty = ys - y0

        buf = self._buffer
        v00 = buf[y0 * self.cols + x0]
        v10 = buf[y0 * self.cols + x1]
        v01 = buf[y1 * self.cols + x0]
        v11 = buf[y1 * self.cols + x1]

        # lerp(a, b, t) = a + (b - a) * t  -> exato quando t == 0
        top = v00 + (v10 - v00) * tx
        bottom = v01 + (v11 - v01) * tx
        return top + (bottom - top) * ty

    def __repr__(self) -> str:
        return f"Field({self.rows}x{self.cols}, mean={self.mean():.3f})"
