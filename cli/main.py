"""Command-line entry points for listing minigames and replaying traces."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from core.config_loader import load_config
from core.dispatcher import MinigameDispatcher
from core.replay import ReplayRunner, load_trace
from streaming.state_serializer import serialize_frames, serialize_state


def _build_dispatcher(config_path: str | None) -> MinigameDispatcher:
    if config_path is None:
        return MinigameDispatcher()
    return MinigameDispatcher.from_config(load_config(config_path))


def run_cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="minigames")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list")
    list_cmd.add_argument("--config")

    replay_cmd = sub.add_parser("replay")
    replay_cmd.add_argument("--trace", required=True)
    replay_cmd.add_argument("--config")
    replay_cmd.add_argument("--out")
    replay_cmd.add_argument("--all", action="store_true", help="write every frame as JSON lines")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    dispatcher = _build_dispatcher(args.config)

    if args.command == "list":
        for label, kind in dispatcher.available():
            print(f"{kind.value}\t{label}")
        return 0

    if args.command == "replay":
        scenes = ReplayRunner(dispatcher).run(load_trace(args.trace))
        if not scenes:
            print("Trace contains no frames.", file=sys.stderr)
            return 1
        data = serialize_frames(scenes) if args.all else serialize_state(scenes[-1])
        if args.out:
            out = Path(args.out)
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_bytes(data)
            print(out)
        else:
            print(data.decode("utf-8").rstrip("\n"))
        return 0

    return 1


def main() -> int:
    return run_cli()


if __name__ == "__main__":
    raise SystemExit(main())
