#!/usr/bin/env python3
"""
Battlesnake Engine Benchmarking Tool

This script benchmarks the move engine (astar_snake) against a baseline snake
that picks a random safe move. Games are played locally under standard rules,
so no game server or snake servers are needed.

Usage:
    python benchmark_snakes.py [--iterations N] [--max-turns N]

The script will:
1. Play N duels (default 200), each seeded with a distinct prime
2. Collect win/draw counts, game lengths and death reasons
3. Generate a report and save results to benchmarks/ directory
"""

import argparse
import json
import random
import sys
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

import sympy
from tqdm import tqdm

# Add the snake directory to path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT / "astar_snake"))

from board import build_board  # noqa: E402
from config import DIRECTION_DELTAS, MAX_HEALTH, EngineConfig  # noqa: E402
from move_selector import decide_move  # noqa: E402
from safety import find_safe_moves  # noqa: E402

ENGINE = "engine"
BASELINE = "baseline"
DRAW = "draw"

MoveFunc = Callable[[dict, random.Random], str]


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs"""
    iterations: int = 200
    width: int = 11
    height: int = 11
    max_turns: int = 300
    food_spawn_chance: float = 0.15
    lookahead_depth: int = 2
    first_seed: int = 100


@dataclass
class GameResult:
    """Result of a single game"""
    game_num: int
    seed: int
    winner: Optional[str] = None  # "engine", "baseline", "draw", or None if the turn limit hit
    turns: int = 0
    engine_length: int = 0
    baseline_length: int = 0
    death_reason_engine: str = ""
    death_reason_baseline: str = ""


@dataclass
class BenchmarkStats:
    """Aggregated benchmark statistics"""
    total_games: int = 0
    engine_wins: int = 0
    baseline_wins: int = 0
    draws: int = 0
    unfinished: int = 0

    total_turns: int = 0
    engine_total_length: int = 0
    baseline_total_length: int = 0

    engine_death_reasons: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    baseline_death_reasons: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    game_results: List[GameResult] = field(default_factory=list)

    def record(self, result: GameResult):
        self.total_games += 1
        self.game_results.append(result)

        if result.winner == ENGINE:
            self.engine_wins += 1
        elif result.winner == BASELINE:
            self.baseline_wins += 1
        elif result.winner == DRAW:
            self.draws += 1
        else:
            self.unfinished += 1

        self.total_turns += result.turns
        self.engine_total_length += result.engine_length
        self.baseline_total_length += result.baseline_length

        if result.death_reason_engine:
            self.engine_death_reasons[result.death_reason_engine] += 1
        if result.death_reason_baseline:
            self.baseline_death_reasons[result.death_reason_baseline] += 1

    def _rate(self, count: int) -> float:
        return count / self.total_games * 100 if self.total_games > 0 else 0

    @property
    def engine_win_rate(self) -> float:
        return self._rate(self.engine_wins)

    @property
    def baseline_win_rate(self) -> float:
        return self._rate(self.baseline_wins)

    @property
    def draw_rate(self) -> float:
        return self._rate(self.draws)

    @property
    def avg_turns(self) -> float:
        return self.total_turns / self.total_games if self.total_games > 0 else 0

    @property
    def avg_engine_length(self) -> float:
        return self.engine_total_length / self.total_games if self.total_games > 0 else 0

    @property
    def avg_baseline_length(self) -> float:
        return self.baseline_total_length / self.total_games if self.total_games > 0 else 0


def baseline_move(game_state: dict, rng: random.Random) -> str:
    """Random safe move, or "up" when nothing is safe."""
    safe_moves = find_safe_moves(build_board(game_state))
    return rng.choice(safe_moves) if safe_moves else "up"


def make_engine_move(config: BenchmarkConfig) -> MoveFunc:
    engine_config = EngineConfig(lookahead_depth=config.lookahead_depth)

    def engine_move(game_state: dict, rng: random.Random) -> str:
        return decide_move(game_state, engine_config, rng).move

    return engine_move


def create_snake(snake_id: str, x: int, y: int) -> dict:
    """New snake with its three segments stacked on the spawn cell."""
    return {
        "id": snake_id,
        "name": snake_id,
        "health": MAX_HEALTH,
        "body": [{"x": x, "y": y} for _ in range(3)],
    }


def spawn_food(board: dict, rng: random.Random):
    occupied = {(seg["x"], seg["y"]) for snake in board["snakes"] for seg in snake["body"]}
    occupied.update((f["x"], f["y"]) for f in board["food"])
    free = [(x, y) for x in range(board["width"]) for y in range(board["height"])
            if (x, y) not in occupied]
    if free:
        x, y = rng.choice(free)
        board["food"].append({"x": x, "y": y})


def _determine_death_cause(snake: dict, others: List[dict], board: dict) -> str:
    """Why a snake that just moved is dead, or "" if it survived the turn."""
    head = snake["body"][0]
    x, y = head["x"], head["y"]

    if x < 0 or x >= board["width"] or y < 0 or y >= board["height"]:
        return "out-of-bounds"

    if snake["health"] <= 0:
        return "starvation"

    for segment in snake["body"][1:]:
        if segment["x"] == x and segment["y"] == y:
            return "self-collision"

    for other in others:
        for segment in other["body"][1:]:
            if segment["x"] == x and segment["y"] == y:
                return "snake-collision"
        other_head = other["body"][0]
        if other_head["x"] == x and other_head["y"] == y and len(other["body"]) >= len(snake["body"]):
            return "head-collision"

    return ""


def run_single_game(game_num: int, seed: int, config: BenchmarkConfig) -> GameResult:
    """Play one engine-vs-baseline duel under standard rules"""
    rng = random.Random(seed)
    strategies = {ENGINE: make_engine_move(config), BASELINE: baseline_move}

    width, height = config.width, config.height
    board = {
        "width": width,
        "height": height,
        "food": [{"x": width // 2, "y": height // 2}],
        "snakes": [
            create_snake(ENGINE, 1, 1),
            create_snake(BASELINE, width - 2, height - 2),
        ],
    }
    result = GameResult(game_num=game_num, seed=seed)

    # One pass per turn played; stops at the turn limit or when at most one snake is left
    while result.turns < config.max_turns and len(board["snakes"]) > 1:
        alive = board["snakes"]

        moves = {}
        for snake in alive:
            game_state = {"turn": result.turns, "board": board, "you": snake}
            moves[snake["id"]] = strategies[snake["id"]](game_state, rng)

        eaten = set()
        for snake in alive:
            dx, dy = DIRECTION_DELTAS[moves[snake["id"]]]
            head = snake["body"][0]
            new_head = {"x": head["x"] + dx, "y": head["y"] + dy}
            snake["body"] = [new_head] + snake["body"]
            snake["health"] -= 1
            if (new_head["x"], new_head["y"]) in {(f["x"], f["y"]) for f in board["food"]}:
                snake["health"] = MAX_HEALTH
                eaten.add((new_head["x"], new_head["y"]))
            else:
                snake["body"].pop()
        board["food"] = [f for f in board["food"] if (f["x"], f["y"]) not in eaten]

        deaths = {}
        for snake in alive:
            others = [s for s in alive if s is not snake]
            cause = _determine_death_cause(snake, others, board)
            if cause:
                deaths[snake["id"]] = cause

        for snake_id, cause in deaths.items():
            if snake_id == ENGINE:
                result.death_reason_engine = cause
            else:
                result.death_reason_baseline = cause
        board["snakes"] = [s for s in alive if s["id"] not in deaths]

        if not board["food"] or rng.random() < config.food_spawn_chance:
            spawn_food(board, rng)

        result.turns += 1

    survivors = [s["id"] for s in board["snakes"]]
    if not survivors:
        result.winner = DRAW
    elif len(survivors) == 1:
        result.winner = survivors[0]

    for snake in board["snakes"]:
        if snake["id"] == ENGINE:
            result.engine_length = len(snake["body"])
        else:
            result.baseline_length = len(snake["body"])

    return result


class BenchmarkRunner:
    """Main benchmark runner"""

    def __init__(self, config: BenchmarkConfig, output_root: Path = PROJECT_ROOT / "benchmarks"):
        self.config = config
        self.stats = BenchmarkStats()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.output_dir = output_root / f"benchmark_{timestamp}"

    def game_seeds(self) -> List[int]:
        """Consecutive primes after first_seed, one per game"""
        seeds = []
        last_prime = self.config.first_seed
        for _ in range(self.config.iterations):
            last_prime = int(sympy.nextprime(last_prime))
            seeds.append(last_prime)
        return seeds

    def run(self) -> BenchmarkStats:
        """Run all benchmark games"""
        print("=" * 70)
        print("     BATTLESNAKE ENGINE BENCHMARK")
        print(f"     {ENGINE} (lookahead {self.config.lookahead_depth}) vs {BASELINE} (random safe)")
        print(f"     Running {self.config.iterations} games")
        print(f"     Board: {self.config.width}x{self.config.height}")
        print("=" * 70)
        print()

        bar_fmt = "{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}] {postfix}"
        with tqdm(total=self.config.iterations, desc="Running games", bar_format=bar_fmt) as pbar:
            for game_num, seed in enumerate(self.game_seeds()):
                self.stats.record(run_single_game(game_num, seed, self.config))
                pbar.set_postfix({
                    "Engine": self.stats.engine_wins,
                    "Baseline": self.stats.baseline_wins,
                    "Draw": self.stats.draws,
                })
                pbar.update(1)

        return self.stats

    def generate_report(self) -> str:
        """Generate a benchmark report"""
        s = self.stats

        report = []
        report.append("\n" + "=" * 70)
        report.append("                    BENCHMARK REPORT")
        report.append("=" * 70)

        report.append("\n📊 OVERALL RESULTS")
        report.append("-" * 40)
        report.append(f"   Total Games:     {s.total_games}")
        report.append(f"   Unfinished:      {s.unfinished}")
        report.append("")

        report.append("🏆 WIN RATES")
        report.append("-" * 40)
        report.append(f"   {ENGINE:10s}  {s.engine_wins:4d} wins ({s.engine_win_rate:5.1f}%)")
        report.append(f"   {BASELINE:10s}  {s.baseline_wins:4d} wins ({s.baseline_win_rate:5.1f}%)")
        report.append(f"   Draws:       {s.draws:4d}      ({s.draw_rate:5.1f}%)")
        report.append("")

        report.append("📈 PERFORMANCE STATISTICS")
        report.append("-" * 40)
        report.append(f"   Average Game Length:     {s.avg_turns:.1f} turns")
        report.append(f"   Avg Engine Length:       {s.avg_engine_length:.1f}")
        report.append(f"   Avg Baseline Length:     {s.avg_baseline_length:.1f}")
        report.append("")

        for name, reasons in ((ENGINE, s.engine_death_reasons), (BASELINE, s.baseline_death_reasons)):
            if not reasons:
                continue
            report.append(f"💀 {name.upper()} DEATH REASONS")
            report.append("-" * 40)
            for reason, count in sorted(reasons.items(), key=lambda x: -x[1]):
                pct = count / s.total_games * 100 if s.total_games > 0 else 0
                report.append(f"   {reason:30s} {count:4d} ({pct:5.1f}%)")
            report.append("")

        report.append("=" * 70)
        report.append(f"   Results saved to: {self.output_dir}")
        report.append("=" * 70)

        return "\n".join(report)

    def save_results(self) -> str:
        """Save benchmark results to files and return the report"""
        self.output_dir.mkdir(parents=True, exist_ok=True)

        summary = {
            "config": {
                "iterations": self.config.iterations,
                "width": self.config.width,
                "height": self.config.height,
                "max_turns": self.config.max_turns,
                "lookahead_depth": self.config.lookahead_depth,
            },
            "results": {
                "total_games": self.stats.total_games,
                "engine_wins": self.stats.engine_wins,
                "baseline_wins": self.stats.baseline_wins,
                "draws": self.stats.draws,
                "unfinished": self.stats.unfinished,
                "engine_win_rate": self.stats.engine_win_rate,
                "avg_turns": self.stats.avg_turns,
                "avg_engine_length": self.stats.avg_engine_length,
                "avg_baseline_length": self.stats.avg_baseline_length,
            },
            "death_reasons": {
                ENGINE: dict(self.stats.engine_death_reasons),
                BASELINE: dict(self.stats.baseline_death_reasons),
            },
            "timestamp": datetime.now().isoformat(),
        }

        with open(self.output_dir / "summary.json", "w") as f:
            json.dump(summary, f, indent=2)

        report = self.generate_report()
        with open(self.output_dir / "report.txt", "w") as f:
            f.write(report)

        return report


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark the move engine against a random-safe baseline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python benchmark_snakes.py                     # Run 200 games
    python benchmark_snakes.py --iterations 50     # Quick run
    python benchmark_snakes.py --lookahead 1       # Shallower lookahead
        """
    )
    parser.add_argument("--iterations", "-n", type=int, default=200,
                        help="Number of games to run (default: 200)")
    parser.add_argument("--width", type=int, default=11, help="Board width (default: 11)")
    parser.add_argument("--height", type=int, default=11, help="Board height (default: 11)")
    parser.add_argument("--max-turns", type=int, default=300,
                        help="Turn limit per game (default: 300)")
    parser.add_argument("--lookahead", type=int, default=2,
                        help="Engine lookahead depth, 0 disables it (default: 2)")

    args = parser.parse_args()

    config = BenchmarkConfig(
        iterations=args.iterations,
        width=args.width,
        height=args.height,
        max_turns=args.max_turns,
        lookahead_depth=args.lookahead,
    )

    runner = BenchmarkRunner(config)
    runner.run()
    print(runner.save_results())


if __name__ == "__main__":
    main()
