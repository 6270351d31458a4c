"""Command-line interface for keyline.

Inspects the animation timeline of a stylesheet and applies timeline edits
(shift a rule, reshape a keyframe curve) to the CSS source without touching
the surrounding text.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from keyline.core.config.loader import load_keyline_config
from keyline.core.config.models import KeylineConfig
from keyline.core.curves.timing import format_ms, format_number
from keyline.core.editing.document import SourceDocument
from keyline.core.editing.patch import TimelineProperty
from keyline.core.session import TimelineSession
from keyline.core.stylesheet.colors import hsl_to_hex
from keyline.core.stylesheet.models import StyleRule
from keyline.core.utils.logging import configure_logging

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _load_config(args: argparse.Namespace) -> KeylineConfig | None:
    try:
        config = load_keyline_config(args.config)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        err_console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        return None

    configure_logging(
        level=args.log_level or config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )
    return config


def _open_session(args: argparse.Namespace) -> TimelineSession | None:
    config = _load_config(args)
    if config is None:
        return None

    css_path = Path(args.file)
    if not css_path.exists():
        err_console.print(f"[red]ERROR: CSS file not found: {css_path}[/red]")
        return None

    document = SourceDocument(css_path.read_text(encoding="utf-8"))
    return TimelineSession(document, config=config)


def _write_output(text: str, out: str | None) -> None:
    if out:
        Path(out).write_text(text, encoding="utf-8")
        err_console.print(f"[green]Wrote[/green] {out}")
    else:
        sys.stdout.write(text)


def _iterations_text(rule: StyleRule) -> str:
    return "infinite" if rule.iteration_count is None else str(rule.iteration_count)


def build_rule_table(rules: list[StyleRule], total_length_ms: float) -> Table:
    """Render extracted rules as a rich table."""
    table = Table(title=f"Timeline ({format_number(total_length_ms)}ms)")
    table.add_column("id", style="bold")
    table.add_column("type")
    table.add_column("delay", justify="right")
    table.add_column("duration", justify="right")
    table.add_column("iterations", justify="right")
    table.add_column("easing")
    table.add_column("keyframes", justify="right")

    for rule in rules:
        table.add_row(
            Text.assemble(("■ ", hsl_to_hex(rule.color) or ""), rule.id),
            rule.type.value,
            f"{format_number(rule.delay)}ms",
            f"{format_number(rule.duration)}ms",
            _iterations_text(rule),
            rule.easing,
            str(len(rule.keyframes)),
        )
    return table


def inspect_command(args: argparse.Namespace) -> int:
    """Print the rules extracted from a stylesheet."""
    session = _open_session(args)
    if session is None:
        return 1

    rules = session.view_state.style_rules
    if args.json:
        payload = {
            "total_length_ms": session.total_length_ms,
            "style_rules": [rule.model_dump(mode="json") for rule in rules],
        }
        console.print_json(data=payload)
    elif not rules:
        console.print("[yellow]No animations or transitions found[/yellow]")
    else:
        console.print(build_rule_table(rules, session.total_length_ms))
    return 0


def shift_command(args: argparse.Namespace) -> int:
    """Set a rule's delay or duration."""
    session = _open_session(args)
    if session is None:
        return 1

    rule = session.get_rule(args.rule)
    if rule is None:
        err_console.print(f"[red]ERROR: No rule with id {args.rule!r}[/red]")
        return 1

    if args.delay is not None:
        prop, value = TimelineProperty.DELAY, format_ms(args.delay)
    else:
        prop, value = TimelineProperty.DURATION, format_ms(max(0.0, args.duration))

    if not session.update_rule_property_value(rule, prop, value):
        err_console.print(f"[red]ERROR: Could not locate the source of {args.rule!r}[/red]")
        return 1

    _write_output(session.editor.text, args.out)
    return 0


def ease_command(args: argparse.Namespace) -> int:
    """Set the curve leading out of one keyframe of a rule."""
    session = _open_session(args)
    if session is None:
        return 1

    x1, y1, x2, y2 = args.points
    if not session.update_easing(args.rule, args.keyframe, ((x1, y1), (x2, y2))):
        err_console.print(
            f"[red]ERROR: Could not set easing for keyframe {args.keyframe} of {args.rule!r}[/red]"
        )
        return 1

    _write_output(session.editor.text, args.out)
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="keyline",
        description="keyline - edit CSS animations on a timeline",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to keyline config (.json/.yaml, default: keyline.json if present)",
    )
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    inspect = sub.add_parser("inspect", help="List the timeline rules of a stylesheet")
    inspect.add_argument("file", help="Path to CSS file")
    inspect.add_argument("--json", action="store_true", help="Print rules as JSON")
    inspect.set_defaults(func=inspect_command)

    shift = sub.add_parser("shift", help="Change a rule's delay or duration")
    shift.add_argument("file", help="Path to CSS file")
    shift.add_argument("--rule", required=True, help="Rule id (see 'inspect')")
    group = shift.add_mutually_exclusive_group(required=True)
    group.add_argument("--delay", type=float, help="New delay in ms")
    group.add_argument("--duration", type=float, help="New duration in ms")
    shift.add_argument("-o", "--out", default=None, help="Output path (default: stdout)")
    shift.set_defaults(func=shift_command)

    ease = sub.add_parser("ease", help="Change the curve of one keyframe")
    ease.add_argument("file", help="Path to CSS file")
    ease.add_argument("--rule", required=True, help="Rule id (see 'inspect')")
    ease.add_argument("--keyframe", required=True, type=int, help="Keyframe index within the rule")
    ease.add_argument(
        "--points",
        required=True,
        nargs=4,
        type=float,
        metavar=("X1", "Y1", "X2", "Y2"),
        help="cubic-bezier control points",
    )
    ease.add_argument("-o", "--out", default=None, help="Output path (default: stdout)")
    ease.set_defaults(func=ease_command)

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
