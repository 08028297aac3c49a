"""
Testes Unitários do Motor Físico (modelo qualitativo).

Objetivo:
    Validar a geometria (sala -> grid, paredes, faixas), o campo de
    velocidade e os operadores de transporte (Advecção, Difusão).

Contexto:
    Garante que ventiladores empurram o ar para fora do centro, que janelas
    sopram para dentro da sala e que o transporte não cria massa do nada.
"""

import pytest
import numpy as np

from roomflow.config import Fan, Room, RoomScenario, SimulationParams, Window
from roomflow.environment import Environment, Wall
from roomflow.field import Field
from roomflow.physics import PhysicsEngine, advect, diffuse
from roomflow.velocity import VelocityField, build_velocity_field

# ============================================================================
# FIXTURES (Setup)
# ============================================================================

@pytest.fixture
def params():
    return SimulationParams()

@pytest.fixture
def empty_env(params):
    """Sala padrão 800x500 sem nada."""
    return Environment(RoomScenario(room=Room(800.0, 500.0)), params)

def make_env(params, windows=(), width=800.0, height=500.0):
    scenario = RoomScenario(room=Room(width, height), windows=list(windows))
    return Environment(scenario, params)

# ============================================================================
# TESTES DE GEOMETRIA
# ============================================================================

def test_room_to_grid_mapping(empty_env):
    assert empty_env.to_grid(0.0, 0.0) == (0.0, 0.0)
    assert empty_env.to_grid(800.0, 500.0) == pytest.approx((43.0, 27.0))
    assert empty_env.to_grid(400.0, 250.0) == pytest.approx((21.5, 13.5))

def test_grid_to_room_roundtrip(empty_env):
    gx, gy = empty_env.to_grid(123.0, 321.0)
    assert empty_env.to_room(gx, gy) == pytest.approx((123.0, 321.0))

@pytest.mark.parametrize("x, y, expected", [
    (10.0, 250.0, Wall.LEFT),
    (790.0, 250.0, Wall.RIGHT),
    (400.0, 5.0, Wall.TOP),
    (400.0, 495.0, Wall.BOTTOM),
])
def test_nearest_wall(empty_env, x, y, expected):
    assert empty_env.nearest_wall(x, y) == expected

def test_nearest_wall_tie_break_order(empty_env):
    """Empates: esquerda > direita > topo > base."""
    assert empty_env.nearest_wall(0.0, 0.0) == Wall.LEFT
    assert empty_env.nearest_wall(800.0, 0.0) == Wall.RIGHT
    assert empty_env.nearest_wall(800.0, 500.0) == Wall.RIGHT
    assert empty_env.nearest_wall(400.0, 250.0) == Wall.TOP

def test_window_band_shape(params):
    """Janela de largura 160 na parede esquerda: colunas 0-4, linhas 12-15."""
    env = make_env(params, [Window(0.0, 250.0, 160.0, 1.0)])
    band = env.velocity_band(env.windows[0])

    assert band.shape == (params.ROWS, params.COLS)
    rows, cols = np.nonzero(band)
    assert set(rows) == {12, 13, 14, 15}
    assert set(cols) == {0, 1, 2, 3, 4}

    # Faixa de ventilação é mais alta (2.8 linhas)
    vent_rows, _ = np.nonzero(env.ventilation_band(env.windows[0]))
    assert set(vent_rows) == {11, 12, 13, 14, 15, 16}

# ============================================================================
# TESTES DO CAMPO DE VELOCIDADE
# ============================================================================

def test_velocity_is_zero_without_fans_or_windows(empty_env, params):
    velocity = build_velocity_field(empty_env, [], params)
    assert np.all(velocity.vx.data == 0.0)
    assert np.all(velocity.vy.data == 0.0)

def test_fan_pushes_air_away_from_center(empty_env, params):
    fan = Fan(400.0, 250.0, 1.0)
    velocity = build_velocity_field(empty_env, [fan], params)
    vx, vy = velocity.vx.data, velocity.vy.data

    # Centro do ventilador em (21.5, 13.5)
    assert vx[13, 30] > 0, "Direita do ventilador deve ter vx > 0"
    assert vx[13, 10] < 0, "Esquerda do ventilador deve ter vx < 0"
    assert vy[25, 21] > 0, "Abaixo do ventilador deve ter vy > 0"
    assert vy[2, 21] < 0, "Acima do ventilador deve ter vy < 0"

def test_fan_velocity_formula(empty_env, params):
    fan = Fan(200.0, 100.0, 2.0)
    velocity = build_velocity_field(empty_env, [fan], params)
    fx, fy = empty_env.to_grid(fan.x, fan.y)

    row, col = 20, 35
    dx, dy = col - fx, row - fy
    d2 = dx * dx + dy * dy + params.FAN_EPSILON
    assert velocity.vx[row, col] == pytest.approx(dx / d2 * params.FAN_STRENGTH * 2.0)
    assert velocity.vy[row, col] == pytest.approx(dy / d2 * params.FAN_STRENGTH * 2.0)

def test_fan_contributions_are_additive(empty_env, params):
    a, b = Fan(100.0, 100.0), Fan(700.0, 400.0, 0.5)
    both = build_velocity_field(empty_env, [a, b], params)
    only_a = build_velocity_field(empty_env, [a], params)
    only_b = build_velocity_field(empty_env, [b], params)
    np.testing.assert_allclose(both.vx.data, only_a.vx.data + only_b.vx.data)
    np.testing.assert_allclose(both.vy.data, only_a.vy.data + only_b.vy.data)

def test_window_blows_into_room(params):
    env = make_env(params, [Window(0.0, 250.0, 160.0, 1.0)])
    velocity = build_velocity_field(env, [], params)

    assert velocity.vx[13, 0] == pytest.approx(params.WINDOW_FLOW)
    assert velocity.vy[13, 0] == 0.0
    assert velocity.vx[0, 0] == 0.0
    assert velocity.vx[13, 10] == 0.0

def test_bottom_window_blows_upwards(params):
    env = make_env(params, [Window(400.0, 500.0, 160.0, 0.5)])
    velocity = build_velocity_field(env, [], params)

    assert velocity.vy[27, 21] == pytest.approx(-params.WINDOW_FLOW * 0.5)
    assert velocity.vx[27, 21] == 0.0

def test_closed_window_has_no_flow(params):
    env = make_env(params, [Window(0.0, 250.0, 160.0, 0.0)])
    velocity = build_velocity_field(env, [], params)
    assert np.all(velocity.vx.data == 0.0)

def test_velocity_downsample(empty_env, params):
    velocity = build_velocity_field(empty_env, [Fan(400.0, 250.0)], params)
    samples = velocity.downsample(4)

    assert len(samples) == 7 * 11
    assert (samples[0].x, samples[0].y) == (0, 0)
    assert samples[-1].x == 40 and samples[-1].y == 24
    assert samples[5].ux == velocity.vx[0, 20]

# ============================================================================
# TESTES DE TRANSPORTE
# ============================================================================

def test_advection_with_zero_velocity_is_identity():
    rng = np.random.default_rng(3)
    field = Field.from_array(rng.uniform(0, 100, size=(28, 44)))
    still = VelocityField.zeros(28, 44)

    moved = advect(field, still, 0.85)
    np.testing.assert_array_equal(moved.data, field.data)

def test_advection_moves_mass_downwind():
    """Vento para a direita: cada célula recebe o valor da célula à esquerda."""
    values = np.zeros((5, 6))
    values[2, 1] = 100.0
    field = Field.from_array(values)
    wind = VelocityField(Field(5, 6, 1.0), Field(5, 6, 0.0))

    moved = advect(field, wind, 1.0)
    assert moved[2, 2] == 100.0
    assert moved[2, 1] == 0.0
    # Borda esquerda amostra a si mesma (clamp)
    assert moved[2, 0] == 0.0

def test_diffusion_keeps_uniform_field():
    field = Field(28, 44, 1020.0)
    mixed = diffuse(field, 0.12)
    np.testing.assert_allclose(mixed.data, 1020.0)

def test_diffusion_spread():
    """Pico no centro: o pico diminui e os vizinhos recebem DIFF/4 do valor."""
    values = np.zeros((28, 44))
    values[14, 22] = 100.0
    mixed = diffuse(Field.from_array(values), 0.12)

    assert mixed[14, 22] == pytest.approx(88.0)
    for row, col in ((13, 22), (15, 22), (14, 21), (14, 23)):
        assert mixed[row, col] == pytest.approx(3.0)
    assert mixed[13, 21] == 0.0
    assert mixed.data.sum() == pytest.approx(100.0)

def test_diffusion_has_no_wraparound():
    values = np.zeros((28, 44))
    values[0, 0] = 100.0
    mixed = diffuse(Field.from_array(values), 0.12)

    assert mixed[27, 0] == 0.0
    assert mixed[0, 43] == 0.0
    assert mixed[0, 1] > 0.0
    # Vizinhos fora do grid são a própria célula (presos à borda)
    assert mixed[0, 0] == pytest.approx(100.0 + (50.0 - 100.0) * 0.12)

# ============================================================================
# TESTES DO MOTOR
# ============================================================================

def test_engine_seeds_fields(params):
    engine = PhysicsEngine(RoomScenario(), params)
    assert np.all(engine.co2.data == 420.0 + 600.0)
    assert np.all(engine.virus.data == 0.0)
    assert np.all(engine.temp.data == 21.0)

def test_empty_room_step_is_inert(params):
    engine = PhysicsEngine(RoomScenario(), params)
    for _ in range(5):
        engine.step()

    np.testing.assert_allclose(engine.co2.data, 1020.0)
    np.testing.assert_allclose(engine.temp.data, 21.0)
    assert np.all(engine.virus.data == 0.0)

def test_snapshot_is_a_copy(params):
    engine = PhysicsEngine(RoomScenario(), params)
    snap = engine.get_snapshot()
    snap['co2'][:] = 0.0
    assert engine.co2[0, 0] == 1020.0

if __name__ == "__main__":
    pytest.main(["-v", __file__])
