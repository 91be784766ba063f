# tools/simulate.py
"""Run the pet headless on a virtual clock and print a JSON summary.

Faster than real time; useful for checking balance changes.

Run: python -m tools.simulate --seconds 300 --actions 5:feed,6:feed,7:feed,8:play,9:sleep
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from models.pet import ACTIONS
from services.engine import PetEngine
from services.persistence import Persistence
from services.scheduler import VirtualScheduler
from services.store import StatStore

logger = logging.getLogger(__name__)


def parse_actions(text: str) -> List[Tuple[float, str]]:
    """Parse 't:action,t:action' into time-sorted pairs."""
    items: List[Tuple[float, str]] = []
    for chunk in filter(None, (c.strip() for c in text.split(","))):
        when, sep, action = chunk.partition(":")
        if not sep or action not in ACTIONS:
            raise argparse.ArgumentTypeError(f"bad action {chunk!r}; expected <seconds>:<{'|'.join(ACTIONS)}>")
        try:
            at = float(when)
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"bad time in {chunk!r}") from e
        if at < 0:
            raise argparse.ArgumentTypeError(f"negative time in {chunk!r}")
        items.append((at, action))
    return sorted(items, key=lambda x: x[0])


def run(
    seconds: float,
    actions: Sequence[Tuple[float, str]] = (),
    seed: Optional[int] = None,
    name: str = "Pal",
    avatar: str = "dog",
    data_dir: Optional[str] = None,
) -> Dict[str, object]:
    """Simulate for the given span and return the final state plus event counts."""
    scheduler = VirtualScheduler()
    store = StatStore.load(Persistence(data_dir)) if data_dir else StatStore()
    engine = PetEngine(store, scheduler, rng=random.Random(seed))
    events: Counter = Counter()
    engine.on_notification(lambda note: events.update([note.kind]))
    if engine.onboarding_required:
        engine.complete_onboarding(name, avatar)

    performed = 0
    for at, action in actions:
        if at > seconds:
            break
        scheduler.advance_to(at)
        if engine.act(action):
            performed += 1
        else:
            logger.debug("t=%.1f %s had no effect", at, action)
    scheduler.advance_to(seconds)

    snap = engine.snapshot()
    engine.shutdown()
    return {
        "seconds": seconds,
        "name": snap.name,
        "avatar": snap.avatar,
        "stats": snap.stats.to_dict(),
        "mood": snap.mood,
        "evolution": snap.evolution_state,
        "actions_performed": performed,
        "notifications": dict(events),
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Headless virtual pet simulation")
    parser.add_argument("--seconds", type=float, default=120.0, help="Simulated seconds to run")
    parser.add_argument("--actions", type=parse_actions, default=[], help="Comma list of <t>:<action>")
    parser.add_argument("--seed", type=int, default=None, help="Seed for random reward events")
    parser.add_argument("--name", default="Pal", help="Pet name when no save exists")
    parser.add_argument("--avatar", default="dog", help="Avatar when no save exists")
    parser.add_argument("--data-dir", default=None, help="Load and save through this directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    if args.seconds < 0:
        parser.error("--seconds must be >= 0")

    summary = run(args.seconds, args.actions, args.seed, args.name, args.avatar, args.data_dir)
    json.dump(summary, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
