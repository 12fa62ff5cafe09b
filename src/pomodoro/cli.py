"""Command line interface for the Pomodoro timer."""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Iterable, Iterator

from . import config, notification, scheduler

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2
BAR_WIDTH = 25


def setup_logging(level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pomodoro", description="A command line pomodoro timer.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    do = subparsers.add_parser("do", help="start the pomodoro timer with the given task name")
    do.add_argument("task", help="what you are working on")
    do.add_argument("-p", "--pomodoro", type=int, dest="duration_pomodoro", help="minutes per pomodoro")
    do.add_argument("-s", "--short", type=int, dest="duration_short_break", help="minutes per short break")
    do.add_argument("-l", "--long", type=int, dest="duration_long_break", help="minutes per long break")
    do.add_argument("-r", "--repetition", type=int, help="pomodoros before a long break")
    do.add_argument("--config", type=Path, help="config file to read instead of ~/.config/pomodoro/config.toml")
    do.add_argument("--fast", action="store_true", help="treat one real second as one Pomodoro minute (handy for demos)")
    do.add_argument("--dry-run", action="store_true", help="show one full cycle without running timers")
    do.add_argument("-v", "--verbose", action="store_true", help="log debug messages")
    return parser.parse_args(list(argv))


def cli_config(args: argparse.Namespace) -> config.PartialConfig:
    return config.validate(
        config.PartialConfig(
            duration_pomodoro=args.duration_pomodoro,
            duration_short_break=args.duration_short_break,
            duration_long_break=args.duration_long_break,
            repetition=args.repetition,
        )
    )


def resolve_config(args: argparse.Namespace) -> config.ResolvedConfig:
    """Merge command line flags over the config file and defaults."""
    merged = cli_config(args) | config.load(args.config) | config.defaults()
    logger.debug("Resolved configuration: %s", merged)
    return merged.resolve()


def format_time(seconds: int) -> str:
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def progress_line(interval: scheduler.Interval, elapsed: int, total: int) -> str:
    filled = BAR_WIDTH * elapsed // total if total else BAR_WIDTH
    if filled >= BAR_WIDTH:
        bar = "#" * BAR_WIDTH
    else:
        bar = "#" * filled + ">" + "-" * (BAR_WIDTH - filled - 1)
    return f"  {interval.name}\t {format_time(elapsed)} [{bar}]"


def confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [Y/n] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("", "y", "yes")


def run_interval(interval: scheduler.Interval, *, second_length: float = 1.0) -> None:
    total = interval.duration_seconds
    for elapsed in range(total + 1):
        sys.stdout.write(f"\r{progress_line(interval, elapsed, total)}")
        sys.stdout.flush()
        if elapsed < total:
            time.sleep(second_length)
    sys.stdout.write(f"\r✓ {interval.name}\t {format_time(total)}\n")
    sys.stdout.flush()


def notify(interval: scheduler.Interval) -> None:
    notification.send(interval.notification_title, interval.notification_body)


def run_session(
    intervals: Iterator[scheduler.Interval],
    *,
    confirm: Callable[[str], bool] = confirm,
    run: Callable[[scheduler.Interval], None] = run_interval,
    notify: Callable[[scheduler.Interval], None] = notify,
) -> int:
    """Run intervals until the user declines one; return how many finished."""
    completed = 0
    try:
        for interval in intervals:
            if not confirm(interval.start_prompt):
                break
            logger.info("Starting %s (%d min)", interval.name, interval.minutes)
            run(interval)
            completed += 1
            notify(interval)
    except KeyboardInterrupt:
        print("\nSession interrupted.")
    return completed


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        resolved = resolve_config(args)
    except config.ConfigError as error:
        print(f"error: {error}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    print(f"On task {args.task}\n")

    if args.dry_run:
        print("Pomodoro  :", resolved.duration_pomodoro, "minute(s)")
        print("Short br. :", resolved.duration_short_break, "minute(s)")
        print("Long br.  :", resolved.duration_long_break, "minute(s)")
        print("Repetition:", resolved.repetition)
        print()
        print("Planned intervals:")
        for item in scheduler.preview(resolved, 2 * resolved.repetition):
            print(f"- {item.name}: {item.minutes} minute(s)")
        return 0

    second_length = 1 / 60 if args.fast else 1.0
    completed = run_session(
        scheduler.EventSequencer(resolved),
        run=lambda interval: run_interval(interval, second_length=second_length),
    )
    print(f"\nYou've done {scheduler.format_pomodoro_count(completed)}.\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
