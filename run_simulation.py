#!/usr/bin/env python3
"""
ARQUIVO PRINCIPAL DE EXECUÇÃO
Script para executar a simulação de uma sala ou a otimização do ventilador (CLI).
"""

import sys
import os
import argparse
import json
import logging
import time
from dataclasses import replace
from datetime import datetime


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="roomflow - Simulador de Qualidade do Ar e Otimizador de Ventilador",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemplos de uso:
  %(prog)s simulate                              # Sala padrão com um ocupante
  %(prog)s simulate -s sala.json -V              # Cenário do editor, com gráficos
  %(prog)s optimize -s sala.json --seed 42 -e melhor.json
        """
    )

    parser.add_argument('command', choices=['simulate', 'optimize'],
                        help='Simular o cenário ou buscar a melhor posição de ventilador')

    parser.add_argument('--scenario', '-s', type=str,
                        help='Arquivo JSON do cenário (default: sala 800x500 com um ocupante)')

    parser.add_argument('--outdoor-co2', type=float,
                        help='CO₂ externo (ppm), sobrescreve o cenário')

    parser.add_argument('--outdoor-temp', type=float,
                        help='Temperatura externa (°C), sobrescreve o cenário')

    parser.add_argument('--steps', type=int, default=40,
                        help='Passos de simulação por execução')

    parser.add_argument('--trials', '-n', type=int, default=80,
                        help='Tentativas da busca aleatória (optimize)')

    parser.add_argument('--seed', type=int,
                        help='Semente do gerador aleatório (optimize)')

    parser.add_argument('--workers', '-w', type=int, default=1,
                        help='Processos paralelos para avaliar tentativas (optimize)')

    parser.add_argument('--export', '-e', type=str,
                        help='Nome do arquivo JSON para exportação')

    parser.add_argument('--history', action='store_true',
                        help='Exportar CSV do histórico (passos ou tentativas)')

    parser.add_argument('--visualize', '-V', action='store_true',
                        help='Gerar gráficos PNG ao final')

    parser.add_argument('--output-dir', '-od', type=str, default='results',
                        help='Diretório para salvar resultados')

    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log detalhado (DEBUG)')
    return parser


def load_scenario(args):
    """Carrega o cenário e aplica as sobrescritas da linha de comando."""
    from roomflow.config import OutdoorBaseline, RoomScenario, create_single_occupant_scenario

    if args.scenario:
        scenario = RoomScenario.load_from_json(args.scenario)
    else:
        scenario = create_single_occupant_scenario()

    # Sobrescritas passam pelo mesmo saneamento do JSON (nan/inf -> default)
    outdoor = {"co2": scenario.outdoor.co2, "temp": scenario.outdoor.temp}
    if args.outdoor_co2 is not None:
        outdoor["co2"] = args.outdoor_co2
    if args.outdoor_temp is not None:
        outdoor["temp"] = args.outdoor_temp
    scenario.outdoor = OutdoorBaseline.from_dict(outdoor)
    return scenario


def export_json(payload: dict, name: str, output_dir: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    # Garante extensão .json
    fname = name if name.endswith('.json') else f"{name}.json"
    json_path = os.path.join(output_dir, fname)
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2)
    return json_path


def export_history(df, prefix: str, output_dir: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    csv_path = os.path.join(output_dir, f"{prefix}_{timestamp}.csv")
    df.to_csv(csv_path, index=False)
    return csv_path


def print_stats(stats):
    print(f"💨 CO₂ Médio: {stats.avg_co2:.0f} ppm (máx {stats.max_co2:.0f})")
    print(f"🦠 Vírus Médio: {stats.avg_virus:.3f} (máx {stats.max_virus:.3f})")
    print(f"🌡️  Temperatura Média: {stats.avg_temp:.2f} °C")


def run_simulate(args, scenario, sim_params) -> int:
    from roomflow.model import RoomAirModel

    print("▶️  Executando simulação...")
    start_time = time.time()
    model = RoomAirModel(scenario, sim_params)
    result = model.run()
    elapsed = time.time() - start_time
    print(f"✅ Simulação finalizada em {elapsed:.2f} segundos.")

    print("\n📊 RESULTADOS PRINCIPAIS")
    print("-" * 30)
    print_stats(result.stats)
    level = result.assessment
    print(f"📋 Qualidade do ar: {level.value} ({level.color})")
    if scenario.used_default_dimensions:
        print("⚠️  Dimensões inválidas no cenário: usados os valores padrão.")

    if args.export:
        path = export_json(result.to_dict(), args.export, args.output_dir)
        print(f"\n💾 JSON salvo em: {path}")

    if args.history:
        path = export_history(model.get_metrics_dataframe(), "history_steps", args.output_dir)
        print(f"💾 CSV Histórico salvo em: {path}")

    if args.visualize:
        from roomflow.plotting import plot_history, plot_result
        print("\n📈 Gerando gráficos...")
        plot_result(result, os.path.join(args.output_dir, 'simulation_fields.png'))
        if model.metrics_history:
            plot_history(model.get_metrics_dataframe(), os.path.join(args.output_dir, 'simulation_history.png'))
    return 0


def run_optimize(args, scenario, sim_params, opt_params) -> int:
    from roomflow.model import simulate
    from roomflow.optimizer import FanPlacementOptimizer

    optimizer = FanPlacementOptimizer(
        params=opt_params,
        sim_params=sim_params,
        seed=args.seed,
        n_workers=args.workers,
    )

    print(f"🔎 Buscando posição do ventilador ({args.trials} tentativas)...")
    start_time = time.time()
    result = optimizer.optimize(scenario)
    elapsed = time.time() - start_time
    print(f"✅ Otimização finalizada em {elapsed:.2f} segundos.")

    print("\n📊 MELHOR VENTILADOR")
    print("-" * 30)
    fan = result.best_fan
    print(f"📍 Posição: ({fan.x:.1f}, {fan.y:.1f}) | força {fan.strength:g}")
    print(f"🎯 Score: {result.score}")
    if result.stats is not None:
        print_stats(result.stats)

    if args.export:
        path = export_json(result.to_dict(), args.export, args.output_dir)
        print(f"\n💾 JSON salvo em: {path}")

    if args.history:
        path = export_history(optimizer.get_trials_dataframe(), "history_trials", args.output_dir)
        print(f"💾 CSV Histórico salvo em: {path}")

    if args.visualize and result.stats is not None:
        from roomflow.plotting import plot_history, plot_result
        print("\n📈 Gerando gráficos...")
        best_run = simulate(scenario.with_fans([fan]), sim_params)
        plot_result(best_run, os.path.join(args.output_dir, 'optimized_fields.png'))
        plot_history(optimizer.get_trials_dataframe(), os.path.join(args.output_dir, 'optimizer_trials.png'), x='trial')
    return 0


def main(argv=None) -> int:
    """Função principal de execução."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    from roomflow.config import OptimizerParams, SimulationParams

    try:
        scenario = load_scenario(args)
        sim_params = replace(SimulationParams(), STEPS=args.steps)
        opt_params = OptimizerParams(TRIALS=args.trials)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Erro no cenário: {e}")
        return 1

    print(f"""
╔{'═'*60}╗
║{'ROOMFLOW - MODO CLI':^60}║
╚{'═'*60}╝
""")
    print("🔧 Configuração:")
    print(f"   Sala: {scenario.room.width:g} x {scenario.room.height:g}")
    print(f"   Ventiladores: {len(scenario.fans)} | Janelas: {len(scenario.windows)} | "
          f"Ocupantes: {len(scenario.occupants)}")
    print(f"   Exterior: CO₂ {scenario.outdoor.co2:g} ppm, {scenario.outdoor.temp:g} °C")
    print()

    try:
        if args.command == 'simulate':
            return run_simulate(args, scenario, sim_params)
        return run_optimize(args, scenario, sim_params, opt_params)
    except KeyboardInterrupt:
        print("\n\n⚠️ Execução interrompida pelo usuário (Ctrl+C).")
        return 130


if __name__ == "__main__":
    sys.exit(main())
