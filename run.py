#!/usr/bin/env python
"""Genetics 示範程式

以隨機產生的背包問題或旅行推銷員問題比較遺傳演算法與純隨機搜尋。

    python run.py knapsack --selection "TournamentSelection(3)"
    python run.py tsp --crossover DavisOrderCrossover --mutation ScrambleMutation
"""

import argparse
import logging
import sys

from genetics import (
    EvolutionConfig,
    GeneticsError,
    KnapsackProblem,
    TravellingSalespersonProblem,
    parse_crossover,
    parse_mutation,
    parse_selection,
)


PROBLEM_DEFAULTS = {
    "knapsack": {
        "selection": "StochasticUniversalSampling",
        "crossover": "MultiPointCrossover(2)",
        "mutation": "InversionMutation",
    },
    "tsp": {
        "selection": "TournamentSelection(4)",
        "crossover": "DavisOrderCrossover",
        "mutation": "ScrambleMutation",
    },
}


def _strategy(parser):
    """將策略解析器包裝為 argparse 型別，錯誤轉為 argparse 的使用說明"""
    def convert(text):
        try:
            parser(text)
        except GeneticsError as e:
            raise argparse.ArgumentTypeError(str(e))
        return text
    return convert


def build_parser():
    parser = argparse.ArgumentParser(description="Evolve solutions to a random problem instance")
    parser.add_argument("problem", choices=sorted(PROBLEM_DEFAULTS))
    parser.add_argument("--selection", type=_strategy(parse_selection))
    parser.add_argument("--crossover", type=_strategy(parse_crossover))
    parser.add_argument("--mutation", type=_strategy(parse_mutation))
    parser.add_argument("--population", type=int, default=50)
    parser.add_argument("--generations", type=int, default=100)
    parser.add_argument("--mutation-rate", type=float, default=0.03)
    parser.add_argument("--size", type=int, default=50, help="number of items or cities")
    parser.add_argument("--seed", type=int)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def random_search(rng, problem, new_chromosome, evaluations):
    """純隨機搜尋，作為比較基準"""
    best = None
    for _ in range(evaluations):
        score = problem.score(new_chromosome(rng))
        if best is None or score > best:
            best = score
    return best


def main(argv=None):
    """執行示範"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    defaults = PROBLEM_DEFAULTS[args.problem]
    config = EvolutionConfig(
        population_size=args.population,
        mutation_rate=args.mutation_rate,
        selection=args.selection or defaults["selection"],
        crossover=args.crossover or defaults["crossover"],
        mutation=args.mutation or defaults["mutation"],
        max_generations=args.generations,
        seed=args.seed,
    )

    try:
        controller = config.build_controller()
    except GeneticsError as e:
        print(f"錯誤: {e}", file=sys.stderr)
        return 2

    rng = config.build_random_source()
    try:
        if args.problem == "knapsack":
            problem = KnapsackProblem.random(rng, num_items=args.size)
            new_chromosome = problem.species().new_random
        else:
            problem = TravellingSalespersonProblem.random(rng, num_cities=args.size)
            new_chromosome = problem.species().new_permutation
    except (GeneticsError, ValueError) as e:
        print(f"錯誤: {e}", file=sys.stderr)
        return 2

    population = [new_chromosome(rng) for _ in range(config.population_size)]
    try:
        history = controller.run(rng, population, problem.score)
    except GeneticsError as e:
        print(f"錯誤: {e}", file=sys.stderr)
        return 2

    baseline = random_search(
        rng, problem, new_chromosome, config.population_size * history.total_generations
    )

    print("=" * 50)
    print(f"  {args.problem}: {config.selection} / {config.crossover} / {config.mutation}")
    print("=" * 50)
    print(f"Random search best: {baseline}")
    print(f"Genetic best:       {history.best_fitness}")
    print(f"Genetic growth:     {history.samples}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
