"""
Módulo de Configuração e Definição de Tipos do roomflow.

ARQUITETURA:
Este módulo atua como o 'Schema Definition' do projeto.
Ele define as constantes do modelo qualitativo e as estruturas de dados (Dataclasses).
Implementa o padrão 'Data Transfer Object' (DTO) para converter JSONs brutos
(o formato usado pelo editor de salas) em objetos Python tipados e saneados.

Responsabilidade:
- Definir Dataclasses para tipagem forte (Sala, Ventiladores, Janelas, Ocupantes).
- Centralizar parâmetros de ajuste do motor (SimulationParams) e do otimizador.
- Saneamento de entrada: valores não-finitos viram defaults, nunca exceções.
- Serialização e Deserialização (JSON <-> Python Object).
"""

import json
import logging
import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from pathlib import Path

logger = logging.getLogger(__name__)

# ============================================================================
# 1. CONSTANTES GERAIS
# ============================================================================

DEFAULT_ROOM_WIDTH = 800.0
DEFAULT_ROOM_HEIGHT = 500.0
DEFAULT_WINDOW_WIDTH = 120.0

OCCUPANT_MIN_INTENSITY = 0.2
OCCUPANT_MAX_INTENSITY = 3.0

# ============================================================================
# 2. REFERÊNCIAS DE CO2 (Domínio Discreto)
# ============================================================================

@dataclass(frozen=True)
class CO2Limits:
    """Faixas de referência de CO2 interno (ppm)."""
    OUTDOOR: float = 420.0
    GOOD: float = 800.0
    MODERATE: float = 1200.0
    POOR: float = 2000.0
    DANGEROUS: float = 5000.0


class AirQualityLevel(str, Enum):
    """Classificação qualitativa do CO2 médio."""
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"
    DANGEROUS = "Dangerous"

    @property
    def color(self) -> str:
        return _LEVEL_COLORS[self]


_LEVEL_COLORS = {
    AirQualityLevel.GOOD: "green",
    AirQualityLevel.MODERATE: "yellow",
    AirQualityLevel.POOR: "orange",
    AirQualityLevel.DANGEROUS: "red",
}


def interpret_co2(avg_co2: float, limits: CO2Limits = CO2Limits()) -> AirQualityLevel:
    """Classifica um CO2 médio (ppm). Limites inclusivos."""
    if avg_co2 <= limits.GOOD:
        return AirQualityLevel.GOOD
    if avg_co2 <= limits.MODERATE:
        return AirQualityLevel.MODERATE
    if avg_co2 <= limits.POOR:
        return AirQualityLevel.POOR
    return AirQualityLevel.DANGEROUS

# ============================================================================
# 3. PARÂMETROS DO MOTOR (Constantes de ajuste)
# ============================================================================

@dataclass(frozen=True)
class SimulationParams:
    """
    Parâmetros do motor de campos (modelo qualitativo, não CFD validado).

    Os valores são empíricos ("parece certo"), sem derivação física.
    Objeto imutável: passe uma instância diferente para variar o modelo.
    """
    # Grid (fixo, independente do tamanho da sala)
    ROWS: int = 28
    COLS: int = 44
    STEPS: int = 40

    # Transporte
    DIFF: float = 0.12            # Fator de mistura por passo (lerp para a média dos vizinhos)
    ADVECT: float = 0.85          # Atenuação do passo semi-Lagrangiano

    # Campo de velocidade
    FAN_STRENGTH: float = 2.8
    FAN_EPSILON: float = 6.0      # células², evita singularidade no centro do ventilador
    WINDOW_FLOW: float = 2.2
    VELOCITY_BAND_HALF_HEIGHT: float = 2.2

    # Ventilação (sumidouro)
    VENT_PULL: float = 0.08
    TEMP_PULL_RATIO: float = 0.8
    VENT_BAND_HALF_HEIGHT: float = 2.8

    # Emissões por passo
    CO2_EMIT: float = 18.0        # ppm
    VIRUS_EMIT: float = 1.0       # unidades arbitrárias
    HEAT_EMIT: float = 0.04       # °C
    EMISSION_FALLOFF: float = 10.0

    # Condições iniciais
    INITIAL_CO2_OFFSET: float = 600.0
    ROOM_TEMP: float = 21.0

    # Limites físicos (clamp)
    CO2_MAX: float = 5000.0
    VIRUS_MAX: float = 1000.0
    TEMP_MIN: float = -10.0
    TEMP_MAX: float = 40.0

    # Amostragem do campo vetorial no resultado
    VECTOR_STRIDE: int = 4

    def __post_init__(self):
        if self.ROWS < 2 or self.COLS < 2:
            raise ValueError(f"Grid inválido: {self.ROWS}x{self.COLS} (mínimo 2x2)")
        if self.STEPS < 0:
            raise ValueError(f"STEPS não pode ser negativo: {self.STEPS}")
        if self.VECTOR_STRIDE < 1:
            raise ValueError(f"VECTOR_STRIDE deve ser >= 1: {self.VECTOR_STRIDE}")
        if not 0.0 <= self.DIFF <= 1.0:
            raise ValueError(f"DIFF deve estar em [0, 1]: {self.DIFF}")


@dataclass(frozen=True)
class OptimizerParams:
    """Busca aleatória de posição de ventilador e pesos da função objetivo."""
    TRIALS: int = 80
    TRIAL_FAN_STRENGTH: float = 1.0
    COMFORT_TEMP: float = 21.0

    # score = Σ peso · (métrica / referência)
    AVG_CO2_WEIGHT: float = 1.0
    AVG_CO2_REF: float = 1200.0
    MAX_CO2_WEIGHT: float = 0.6
    MAX_CO2_REF: float = 2500.0
    AVG_VIRUS_WEIGHT: float = 1.2
    AVG_VIRUS_REF: float = 8.0
    MAX_VIRUS_WEIGHT: float = 0.9
    MAX_VIRUS_REF: float = 25.0
    TEMP_PENALTY_WEIGHT: float = 0.15

    SCORE_DECIMALS: int = 3

    def __post_init__(self):
        if self.TRIALS < 0:
            raise ValueError(f"TRIALS não pode ser negativo: {self.TRIALS}")

# ============================================================================
# 4. SANEAMENTO DE ENTRADA
# ============================================================================

def _finite(value: Any, default: float) -> float:
    """Retorna value como float se for número finito; senão o default."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return float(value)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_mapping(value: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"Entrada de {kind} inválida (esperado objeto): {value!r}")
    return value

# ============================================================================
# 5. DATA STRUCTURES (O Schema do Cenário)
# ============================================================================

@dataclass
class Room:
    """Extensão física da sala (unidade abstrata, ex: pixels do editor)."""
    width: float = DEFAULT_ROOM_WIDTH
    height: float = DEFAULT_ROOM_HEIGHT


@dataclass
class Fan:
    x: float
    y: float
    strength: float = 1.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Fan':
        data = _as_mapping(data, "ventilador")
        return cls(
            x=_finite(data.get('x'), 0.0),
            y=_finite(data.get('y'), 0.0),
            strength=_finite(data.get('strength'), 1.0),
        )


@dataclass
class Window:
    """Janela como barra horizontal centrada em (x, y)."""
    x: float
    y: float
    width: float = DEFAULT_WINDOW_WIDTH
    open_fraction: float = 1.0  # 0 = fechada, 1 = totalmente aberta

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Window':
        data = _as_mapping(data, "janela")
        # O editor usa 'w'; 'width' vale quando 'w' falta ou é inválido
        width = _finite(data.get('w'), _finite(data.get('width'), DEFAULT_WINDOW_WIDTH))
        return cls(
            x=_finite(data.get('x'), 0.0),
            y=_finite(data.get('y'), 0.0),
            width=width,
            open_fraction=_clamp(_finite(data.get('open'), 1.0), 0.0, 1.0),
        )


@dataclass
class Occupant:
    x: float
    y: float
    intensity: float = 1.0  # Multiplicador de emissão

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Occupant':
        data = _as_mapping(data, "ocupante")
        intensity = _finite(data.get('intensity'), 1.0)
        return cls(
            x=_finite(data.get('x'), 0.0),
            y=_finite(data.get('y'), 0.0),
            intensity=_clamp(intensity, OCCUPANT_MIN_INTENSITY, OCCUPANT_MAX_INTENSITY),
        )


@dataclass
class OutdoorBaseline:
    """Condições externas (vindas de um serviço externo ou defaults)."""
    co2: float = CO2Limits.OUTDOOR
    temp: float = 10.0
    virus: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'OutdoorBaseline':
        if not isinstance(data, dict):
            return cls()
        return cls(
            co2=_finite(data.get('co2'), CO2Limits.OUTDOOR),
            temp=_finite(data.get('temp'), 10.0),
        )


@dataclass
class RoomScenario:
    """
    Objeto Raiz de Configuração.
    Representa o conteúdo completo de uma requisição de simulação.
    """
    room: Room = field(default_factory=Room)
    fans: List[Fan] = field(default_factory=list)
    windows: List[Window] = field(default_factory=list)
    occupants: List[Occupant] = field(default_factory=list)
    outdoor: OutdoorBaseline = field(default_factory=OutdoorBaseline)
    used_default_dimensions: bool = False

    def __post_init__(self):
        # Dimensões inválidas são substituídas, não rejeitadas
        width, height = self.room.width, self.room.height
        if not (_finite(width, -1.0) > 0 and _finite(height, -1.0) > 0):
            self.room = Room(
                width=width if _finite(width, -1.0) > 0 else DEFAULT_ROOM_WIDTH,
                height=height if _finite(height, -1.0) > 0 else DEFAULT_ROOM_HEIGHT,
            )
            self.used_default_dimensions = True
            logger.warning(
                f"Dimensões inválidas ({width!r}x{height!r}); "
                f"usando {self.room.width:g}x{self.room.height:g}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoomScenario':
        """
        Factory method que hidrata um dicionário (do JSON) em objetos tipados.
        Coleções ausentes ou que não são listas viram listas vazias.
        """
        if not isinstance(data, dict):
            raise ValueError(f"JSON de cenário inválido: esperado objeto, recebido {type(data).__name__}")

        return cls(
            room=Room(
                width=_finite(data.get('width'), math.nan),
                height=_finite(data.get('height'), math.nan),
            ),
            fans=[Fan.from_dict(f) for f in _as_list(data.get('fans'))],
            windows=[Window.from_dict(w) for w in _as_list(data.get('windows'))],
            occupants=[Occupant.from_dict(o) for o in _as_list(data.get('occupants'))],
            outdoor=OutdoorBaseline.from_dict(data.get('outdoor')),
        )

    @classmethod
    def load_from_json(cls, filepath: Union[str, Path]) -> 'RoomScenario':
        """Carrega e valida um arquivo JSON do disco."""
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Arquivo de cenário não encontrado: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"JSON de cenário malformado em {path}: {e}")

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Formato de fio (o mesmo aceito por from_dict)."""
        return {
            'width': self.room.width,
            'height': self.room.height,
            'fans': [asdict(f) for f in self.fans],
            'windows': [
                {'x': w.x, 'y': w.y, 'w': w.width, 'open': w.open_fraction}
                for w in self.windows
            ],
            'occupants': [asdict(o) for o in self.occupants],
            'outdoor': {'co2': self.outdoor.co2, 'temp': self.outdoor.temp},
        }

    def save_to_json(self, filepath: Union[str, Path]):
        """Salva o cenário em JSON (útil para criar templates)."""
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=4)

    def with_fans(self, fans: List[Fan]) -> 'RoomScenario':
        """Cópia rasa do cenário trocando apenas os ventiladores."""
        return RoomScenario(
            room=self.room,
            fans=list(fans),
            windows=self.windows,
            occupants=self.occupants,
            outdoor=self.outdoor,
            used_default_dimensions=self.used_default_dimensions,
        )

# ============================================================================
# 6. PRESETS ESTÁTICOS (Geradores de Default)
# ============================================================================

def create_single_occupant_scenario() -> RoomScenario:
    """Sala padrão vazia com um ocupante no centro."""
    return RoomScenario(
        room=Room(DEFAULT_ROOM_WIDTH, DEFAULT_ROOM_HEIGHT),
        occupants=[Occupant(DEFAULT_ROOM_WIDTH / 2, DEFAULT_ROOM_HEIGHT / 2, 1.0)],
    )


def create_classroom_scenario() -> RoomScenario:
    """Sala de aula: duas fileiras de ocupantes e uma janela na parede esquerda."""
    occupants = [
        Occupant(x, y, 1.0)
        for y in (180.0, 320.0)
        for x in (200.0, 320.0, 440.0, 560.0)
    ]
    occupants.append(Occupant(400.0, 60.0, 1.5))  # Professor falando
    return RoomScenario(
        room=Room(DEFAULT_ROOM_WIDTH, DEFAULT_ROOM_HEIGHT),
        windows=[Window(20.0, 250.0, 160.0, 1.0)],
        occupants=occupants,
    )
