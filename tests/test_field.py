"""
Testes Unitários do Campo Escalar (Field).

Objetivo:
    Validar o armazenamento contíguo e a amostragem bilinear com clamp
    nas bordas (sem wraparound).
"""

import pytest
import numpy as np

from roomflow.field import Field

# ============================================================================
# FIXTURES (Setup)
# ============================================================================

@pytest.fixture
def random_field():
    """Campo 28x44 com valores aleatórios determinísticos."""
    rng = np.random.default_rng(1234)
    return Field.from_array(rng.uniform(-50.0, 5000.0, size=(28, 44)))

@pytest.fixture
def small_field():
    return Field.from_array(np.array([[0.0, 10.0], [20.0, 30.0]]))

# ============================================================================
# ARMAZENAMENTO
# ============================================================================

def test_fill_and_shape():
    field = Field(3, 4, fill=2.5)
    assert field.shape == (3, 4)
    assert np.all(field.data == 2.5)
    assert field.flat.size == 12

def test_row_major_indexing():
    """Índice linear = linha * colunas + coluna."""
    field = Field(3, 4)
    field[2, 1] = 7.0
    assert field.flat[2 * 4 + 1] == 7.0
    assert field.data[2, 1] == 7.0
    assert field[2, 1] == 7.0

def test_copy_is_independent():
    field = Field(2, 2, fill=1.0)
    clone = field.copy()
    clone[0, 0] = 99.0
    assert field[0, 0] == 1.0

def test_from_array_rejects_non_2d():
    with pytest.raises(ValueError):
        Field.from_array(np.zeros(5))

# ============================================================================
# AMOSTRAGEM BILINEAR
# ============================================================================

def test_sample_integer_coordinates_is_exact(random_field):
    """Em coordenadas inteiras o valor armazenado é reproduzido exatamente."""
    for row in range(random_field.rows):
        for col in range(random_field.cols):
            assert random_field.sample(col, row) == random_field[row, col]

def test_sample_midpoint(small_field):
    assert small_field.sample(0.5, 0.5) == pytest.approx(15.0)
    assert small_field.sample(0.5, 0.0) == pytest.approx(5.0)
    assert small_field.sample(0.0, 0.25) == pytest.approx(5.0)

def test_sample_clamps_outside_grid(small_field):
    """Coordenadas fora do grid são presas à borda."""
    assert small_field.sample(-5.0, -5.0) == 0.0
    assert small_field.sample(100.0, 100.0) == 30.0
    assert small_field.sample(1.5, 0.0) == 10.0
    assert small_field.sample(-1.0, 0.5) == pytest.approx(10.0)

def test_sample_last_index_has_no_wraparound():
    """O vizinho +1 da última coluna é ela mesma, não a primeira."""
    field = Field.from_array(np.array([[100.0, 0.0, 0.0, 1.0],
                                       [0.0, 0.0, 0.0, 1.0]]))
    assert field.sample(3.0, 0.0) == 1.0
    assert field.sample(3.0, 1.0) == 1.0

def test_sample_many_matches_scalar(random_field):
    rng = np.random.default_rng(7)
    xs = rng.uniform(-3, 47, size=50)
    ys = rng.uniform(-3, 31, size=50)
    batch = random_field.sample_many(xs, ys)
    for x, y, value in zip(xs, ys, batch):
        assert random_field.sample(x, y) == pytest.approx(value)

if __name__ == "__main__":
    pytest.main(["-v", __file__])
