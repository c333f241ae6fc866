"""Entrypoint for solving engraving grids from the command line."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from engraving_solver.src.core.errors import EngravingInputError
from engraving_solver.src.core.grid_utils import apply_solution
from engraving_solver.src.data.shape_registry import load_shape_registry
from engraving_solver.src.data.visualization import plot_solution, render_grid
from engraving_solver.src.executor.solver import solve
from engraving_solver.src.search.best_target import BestTargetSearch, SearchOptions, unlocked_up_to
from engraving_solver.src.utils import config_loader
from engraving_solver.scripts.utils import find_weapon, load_inventory, weapon_candidates


def _add_inventory_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--inventory", type=Path, help="JSON file with inventory slots")
    group.add_argument("--preset", help="Built-in inventory preset id or name")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Soul weapon engraving auto-solver")
    parser.add_argument("--show-config", action="store_true", help="Print the runtime configuration first")
    sub = parser.add_subparsers(dest="command", required=True)

    p_solve = sub.add_parser("solve", help="Tile one weapon's grid")
    p_solve.add_argument("--grids", type=Path, required=True, help="Official weapon grids JSON")
    p_solve.add_argument("--weapon", type=int, required=True, help="Weapon id")
    _add_inventory_args(p_solve)
    p_solve.add_argument("--max-solutions", type=int, default=None)
    p_solve.add_argument("--plot", type=Path, default=None, help="Save the first solution as an image")

    p_best = sub.add_parser("best", help="Rank weapons by how well the inventory fits")
    p_best.add_argument("--grids", type=Path, required=True, help="Official weapon grids JSON")
    _add_inventory_args(p_best)
    p_best.add_argument("--highest-unlocked", type=int, default=None)
    p_best.add_argument("--time-budget-ms", type=int, default=None)
    return parser


def _run_solve(args: argparse.Namespace) -> int:
    registry = load_shape_registry()
    weapon = find_weapon(args.grids, args.weapon)
    inventory = load_inventory(registry, args.inventory, args.preset)
    grid = weapon.template.build_grid()
    solutions = solve(grid, inventory.available(), max_solutions=args.max_solutions)
    if not solutions:
        print(f"No solutions for {weapon.name}")
        return 1
    print(f"{weapon.name}: {len(solutions)} solution(s)")
    for i, solution in enumerate(solutions, 1):
        board = grid.copy()
        apply_solution(board, solution)
        print(f"\nSolution {i}: {solution.shape_signature()}")
        print(render_grid(board))
    if args.plot is not None:
        plot_solution(grid, solutions[0], args.plot)
        print(f"\nSaved {args.plot}")
    return 0


def _run_best(args: argparse.Namespace) -> int:
    registry = load_shape_registry()
    inventory = load_inventory(registry, args.inventory, args.preset)
    options = SearchOptions(
        time_budget_ms=args.time_budget_ms,
        allowed=unlocked_up_to(args.highest_unlocked) if args.highest_unlocked is not None else None,
    )
    report = BestTargetSearch(options).run(weapon_candidates(args.grids), inventory.available())
    if not report.results:
        print("No weapon can be filled with this inventory")
        return 1
    for rank, result in enumerate(report.results, 1):
        print(
            f"{rank}. {result.candidate.name} (id {result.candidate.candidate_id}) "
            f"score {result.score}: {result.solution_count} solution(s), "
            f"{result.same_piece_count} same-piece"
        )
    if report.timed_out:
        print("[WARN] Search stopped at the time budget; ranking is partial.", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.show_config:
        config_loader.print_runtime_config()
    try:
        if args.command == "solve":
            return _run_solve(args)
        return _run_best(args)
    except EngravingInputError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
