from __future__ import annotations

import argparse
import sys
from typing import Dict, List, Optional

import numpy as np
import gymnasium as gym

import tetris_autoplay.env  # noqa: F401
from tetris_autoplay.autoplay.planner import plan_move


def run_episode(env: gym.Env, seed: Optional[int] = None) -> Dict[str, int]:
    """Play one episode with the heuristic planner choosing every placement."""
    unwrapped = env.unwrapped
    obs, info = env.reset(seed=seed)
    done = False
    while not done:
        state = unwrapped.state
        plan = plan_move(state.piece, state.board)
        action = unwrapped.plan_to_action(plan)
        obs, reward, terminated, truncated, info = env.step(action)
        done = terminated or truncated
    return {
        "score": int(info["score"]),
        "level": int(info["level"]),
        "lines": int(info["lines_cleared"]),
        "pieces": int(info["pieces_placed"]),
    }


def _print_progress(ep_idx: int, total: int, result: Dict[str, int]) -> None:
    width = 30
    filled = int(width * (ep_idx + 1) / max(1, total))
    bar = "=" * filled + "." * (width - filled)
    msg = (f"\r[{bar}] {ep_idx + 1}/{total}  score={result['score']}  "
           f"lines={result['lines']}  pieces={result['pieces']}")
    print(msg, end="", file=sys.stdout, flush=True)


def evaluate(episodes: int = 5, seed: int = 0, max_pieces: int = 500, progress: bool = True) -> List[Dict[str, int]]:
    env = gym.make("Tetris-10x20-v0", max_pieces=max_pieces)
    results: List[Dict[str, int]] = []
    try:
        for ep in range(episodes):
            result = run_episode(env, seed=seed + ep)
            results.append(result)
            if progress:
                _print_progress(ep, episodes, result)
    finally:
        env.close()
    if progress:
        print()
    return results


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run the heuristic autoplay planner headless")
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--max-pieces", type=int, default=500,
                   help="Truncate an episode after this many placements")
    p.add_argument("--quiet", action="store_true", help="Only print the summary")
    return p


def main() -> None:
    args = build_parser().parse_args()
    results = evaluate(args.episodes, args.seed, args.max_pieces, progress=not args.quiet)
    scores = np.array([r["score"] for r in results], dtype=np.float64)
    lines = np.array([r["lines"] for r in results], dtype=np.float64)
    print(f"episodes={len(results)}  mean score={scores.mean():.1f}  max score={scores.max():.0f}  "
          f"mean lines={lines.mean():.1f}")


if __name__ == "__main__":  # pragma: no cover
    main()
