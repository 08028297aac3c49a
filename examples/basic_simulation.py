#!/usr/bin/env python3
"""
Exemplo de Simulação Básica
Simula a sala de aula de exemplo e depois busca a melhor posição de ventilador.
"""

import os
import sys
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from roomflow import RoomScenario, optimize_fan, simulate


def run_basic_simulation():
    """Executa simulação + otimização com configurações padrão."""

    print("🚀 Iniciando simulação básica do roomflow")
    print("=" * 60)

    # 1. Carregar cenário
    print("1. Carregando cenário...")
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "scenarios", "classroom.json")
    scenario = RoomScenario.load_from_json(path)

    # 2. Simular sem ventilador
    print("2. Simulando sala sem ventilador...")
    baseline = simulate(scenario)
    print(f"   CO₂ médio: {baseline.stats.avg_co2:.0f} ppm ({baseline.assessment.value})")
    print(f"   Vírus máx: {baseline.stats.max_virus:.2f}")

    # 3. Otimizar posição do ventilador
    print("3. Buscando posição do ventilador (80 tentativas)...")
    best = optimize_fan(scenario, seed=42)
    fan = best.best_fan
    print(f"   Melhor posição: ({fan.x:.0f}, {fan.y:.0f}) | score {best.score}")
    print(f"   CO₂ médio com ventilador: {best.stats.avg_co2:.0f} ppm")

    print("=" * 60)
    return baseline, best


if __name__ == "__main__":
    run_basic_simulation()
