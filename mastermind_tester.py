#!/usr/bin/env python3
"""mastermind_tester.py

Runs automated simulations using the assistant in mastermind.py and prints summary statistics.
Optionally writes a matplotlib graph to disk.

Examples:
  python3 mastermind_tester.py --colors ABCDEF --positions 4 --limit 200
  python3 mastermind_tester.py --colors rgbcmy --positions 4 --strategy equivalence --plot results.png

Notes:
- Secrets are taken from all possible codes, optionally shuffled with --seed.
- Use --plot to require matplotlib.
"""

from __future__ import annotations

import argparse
import random
import statistics
import sys
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional

import tqdm

import mastermind


@dataclass(frozen=True)
class GameResult:
    secret: str
    solved: bool
    turns: int
    final_candidates: int
    first_guess: str


def _iter_progress(iterable, *, enabled: bool, desc: str, unit: str):
    if enabled:
        return tqdm.tqdm(iterable, desc=desc, unit=unit)
    return iterable


def simulate_game(
    *,
    secret: str,
    colors: str,
    positions: int,
    strategy: str,
    max_turns: int,
    first_guess: Optional[str] = None,
) -> GameResult:
    assistant = mastermind.MastermindAssistant(colors, positions)
    if first_guess is None:
        first_guess = assistant.partition_intent(assistant.choose_initial_intent())

    guess = first_guess
    for turn in range(1, max_turns + 1):
        if turn > 1:
            if strategy == "equivalence" and assistant.exist_equivalences():
                guess = assistant.choose_2nd_intent()
            else:
                guess = assistant.choose_intent()

        black, white = mastermind.evaluate(secret, guess)
        if black == positions:
            return GameResult(
                secret=secret,
                solved=True,
                turns=turn,
                final_candidates=assistant.num_candidates(),
                first_guess=first_guess,
            )

        assistant.update(guess, black, white)

    return GameResult(
        secret=secret,
        solved=False,
        turns=max_turns,
        final_candidates=assistant.num_candidates(),
        first_guess=first_guess,
    )


def summarize(results: Iterable[GameResult]) -> str:
    results = list(results)
    if not results:
        return "No results."

    solved = [r for r in results if r.solved]
    failed = [r for r in results if not r.solved]

    dist = Counter(r.turns for r in solved)

    lines: List[str] = []
    lines.append(f"Games: {len(results)}")
    lines.append(f"Solved: {len(solved)} ({len(solved) / len(results) * 100:.2f}%)")
    lines.append(f"Failed: {len(failed)} ({len(failed) / len(results) * 100:.2f}%)")

    if solved:
        turns_list = [r.turns for r in solved]
        lines.append(f"Avg turns (solved): {statistics.mean(turns_list):.3f}")
        lines.append(f"Median turns (solved): {statistics.median(turns_list):.1f}")
        lines.append(f"Worst case (solved): {max(turns_list)}")
        lines.append("Turn distribution (solved): " + ", ".join(f"{t}:{dist[t]}" for t in sorted(dist)))

    lines.append(f"First guess: {results[0].first_guess}")

    if failed:
        examples = ", ".join(r.secret for r in failed[:10])
        lines.append(f"Failed examples (up to 10): {examples}")

    return "\n".join(lines)


def plot_results(*, results: List[GameResult], max_turns: int, out_path: str) -> None:
    """
    Left: games per number of turns, unsolved games in a separate bar.
    Right: share of games solved within n turns.
    """
    # Import matplotlib only if plotting is requested.
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt  # noqa: E402

    turns_axis = list(range(1, max_turns + 1))
    by_turns = Counter(r.turns for r in results if r.solved)
    unsolved = sum(1 for r in results if not r.solved)
    games = len(results)

    cumulative: List[float] = []
    running = 0
    for t in turns_axis:
        running += by_turns.get(t, 0)
        cumulative.append(running / games if games else 0.0)

    fig, (hist_ax, cum_ax) = plt.subplots(1, 2, figsize=(11, 4.5))
    first = results[0].first_guess if results else "-"
    fig.suptitle(f"Mastermind assistant: {games} secrets, opening {first}")

    hist_ax.bar(turns_axis, [by_turns.get(t, 0) for t in turns_axis], color="C0", label="Solved")
    hist_ax.bar([max_turns + 1], [unsolved], color="C3", label="Unsolved")
    hist_ax.set_xticks(turns_axis + [max_turns + 1])
    hist_ax.set_xticklabels([str(t) for t in turns_axis] + [f">{max_turns}"])
    hist_ax.set_xlabel("Turns")
    hist_ax.set_ylabel("# secrets")
    hist_ax.legend(loc="upper right")

    cum_ax.step(turns_axis, cumulative, where="post", color="C2")
    cum_ax.set_ylim(0.0, 1.05)
    cum_ax.set_xticks(turns_axis)
    cum_ax.set_xlabel("Turns")
    cum_ax.set_ylabel("Solved within n turns")
    cum_ax.grid(alpha=0.3)

    fig.tight_layout()
    fig.savefig(out_path, dpi=120)
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Run Mastermind assistant simulations and print statistics.")
    ap.add_argument("--colors", type=str, default="ABCDEF", help="The colors, one character each.")
    ap.add_argument("--positions", type=int, default=4, help="Number of positions in the code.")
    ap.add_argument("--limit", type=int, default=0, help="Limit number of secrets (0 = no limit).")
    ap.add_argument("--seed", type=int, default=None, help="Shuffle the secrets with this seed before --limit.")
    ap.add_argument("--max-turns", type=int, default=10, help="Max turns per game.")
    ap.add_argument(
        "--strategy",
        choices=["plain", "equivalence"],
        default="plain",
        help="Score every intent, or one intent per color-equivalence class while classes remain.",
    )
    ap.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    ap.add_argument("--plot", type=str, default=None, help="Write a matplotlib graph to this path (e.g. results.png).")
    args = ap.parse_args(argv)

    try:
        probe = mastermind.MastermindAssistant(args.colors, args.positions)
    except mastermind.MastermindError as e:
        print(e, file=sys.stderr)
        return 2

    secrets = list(probe.iter_candidates())
    if args.seed is not None:
        random.Random(args.seed).shuffle(secrets)
    if args.limit and args.limit > 0:
        secrets = secrets[: args.limit]

    # the opening intent does not depend on the secret
    first_guess = probe.partition_intent(probe.choose_initial_intent())

    results: List[GameResult] = []
    for secret in _iter_progress(secrets, enabled=(not args.no_progress), desc="Simulating", unit="game"):
        results.append(
            simulate_game(
                secret=secret,
                colors=args.colors,
                positions=args.positions,
                strategy=args.strategy,
                max_turns=args.max_turns,
                first_guess=first_guess,
            )
        )

    print(summarize(results))

    if args.plot:
        try:
            plot_results(results=results, max_turns=args.max_turns, out_path=args.plot)
            print(f"Wrote plot: {args.plot}")
        except ModuleNotFoundError as e:
            print(f"Plot requested but missing dependency: {e}. Install matplotlib to use --plot.", file=sys.stderr)
            return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
