"""Convenience runner showing rumor garbage collection over a long session.

Usage (from repository root):
    python run_gossip_gc_demo.py

You can override defaults, for example:
    python run_gossip_gc_demo.py --turns 300 --seed 42 --burst 220

Every other turn a line of narrative produces a rumor, characters gossip with
each other, and maintenance runs once per turn.  Halfway through, a burst of
rumors is injected in a single turn to show the hard cap holding.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parent
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from rumormill.gossip import GossipConfig, GossipEngine, Rumor
from rumormill.roster import CharacterRoster
from rumormill.runtime.rng_service import RNGService

CAST = ("Maxim", "Chloe", "Ashley", "Sophia", "Leon", "Diana")

NARRATIVE = (
    "{a} kissed {b} behind the library",
    "{a} fought with {b} in the hallway",
    "{a} betrayed {b} at the council",
    "{a} won the debate against {b}",
)


class Clock:
    def __init__(self) -> None:
        self.turn = 0

    def __call__(self) -> int:
        return self.turn


def _build_roster() -> CharacterRoster:
    roster = CharacterRoster()
    for index, name in enumerate(CAST):
        roster.add(name, important=index < 4)
    return roster


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--turns", type=int, default=200, help="Number of turns to simulate")
    parser.add_argument("--seed", type=int, default=1337, help="Random seed for reproducibility")
    parser.add_argument("--burst", type=int, default=200, help="Rumors injected in one turn at mid-run")
    parser.add_argument("--hard-cap", type=int, default=GossipConfig().hard_cap, help="Maximum rumors kept")
    return parser.parse_args()


def run(turns: int, seed: int, burst: int, hard_cap: int) -> GossipEngine:
    clock = Clock()
    roster = _build_roster()
    picker = RNGService(seed=seed, salt="demo")
    engine = GossipEngine(roster, config=GossipConfig(hard_cap=hard_cap), turn_source=clock, seed=seed)

    peak = 0
    for turn in range(1, turns + 1):
        clock.turn = turn
        speaker, listener = picker.stream("demo.pair", scope={"turn": turn}).sample(CAST, 2)
        roster.set_focus([speaker, listener])

        if turn % 2 == 0:
            line = NARRATIVE[(turn // 2) % len(NARRATIVE)]
            engine.observe(line.format(a=speaker, b=listener))
        if turn == turns // 2:
            for index in range(burst):
                engine.insert(
                    Rumor(id=f"burst_{index}", text="whispers", subject=speaker, created_turn=turn, known_by=[speaker])
                )
            peak = max(peak, engine.store.count())

        engine.auto_propagate(speaker, listener)
        engine.auto_propagate(listener, speaker)

        report = engine.maybe_run_maintenance(turn)
        if report.swept or report.evicted:
            print(
                f"turn {turn:4d}: faded={len(report.faded):3d} archived={len(report.archived):3d} "
                f"evicted={len(report.evicted):3d} remaining={report.remaining:3d}"
            )
    print(f"\nPeak before maintenance: {peak}; final store: {engine.store.count()} rumors {engine.stats()}")
    counters = {key: int(value) for key, value in sorted(engine.metrics.counters.items())}
    print(f"Counters: {counters}")
    return engine


def main() -> None:
    args = parse_args()
    run(args.turns, args.seed, args.burst, args.hard_cap)


if __name__ == "__main__":
    main()
