"""datewise CLI - date text, presets and recurrence from the command line."""

import json
import logging
import sys
from datetime import datetime

import click

from .adapters.clock import SystemClock
from .config import Config, load_config
from .core.calendar_grid import WEEKDAY_HEADERS
from .core.date_values import combine
from .core.errors import DatewiseError
from .core.occurrences import next_occurrence, occurrences
from .core.presets import quick_options, resolve_preset_label
from .core.recurrence import describe_pattern, serialize_pattern
from .core.time_text import format_time
from .workflows import (
    PickerView,
    build_picker_view,
    default_window,
    reference_now,
    require_date,
    require_pattern,
    require_time,
)


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _setup(ctx: click.Context) -> tuple[Config, datetime]:
    """Config and reference instant for a command."""
    config = ctx.obj["config"]
    try:
        now = reference_now(ctx.obj["now_text"], SystemClock())
    except DatewiseError as e:
        _fail(e)
    return config, now


@click.group()
@click.version_option(package_name="datewise")
@click.option("--now", "now_text", default=None, help="Reference instant (YYYY-MM-DD[THH:MM]), defaults to the system clock")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, now_text: str | None, debug: bool):
    """datewise - date/time resolution and recurrence engine."""
    config = load_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level),
    )
    ctx.obj = {"config": config, "now_text": now_text}


@main.command("parse-date")
@click.argument("text")
@click.pass_context
def parse_date_cmd(ctx, text: str):
    """Parse free-form date text (e.g. "3/4/25", "tomorrow", "March 4")."""
    config, now = _setup(ctx)
    try:
        click.echo(require_date(text, now.date(), config).isoformat())
    except DatewiseError as e:
        _fail(e)


@main.command("parse-time")
@click.argument("text")
@click.pass_context
def parse_time_cmd(ctx, text: str):
    """Parse free-form time text (e.g. "4pm", "16:30")."""
    config, _ = _setup(ctx)
    try:
        t = require_time(text)
    except DatewiseError as e:
        _fail(e)
    click.echo(f"{t.strftime('%H:%M')} ({format_time(t, config.time_format)})")


@main.command()
@click.argument("label", nargs=-1, required=True)
@click.pass_context
def preset(ctx, label: tuple[str, ...]):
    """Resolve a preset such as "this weekend" or "3 weeks"."""
    _, now = _setup(ctx)
    text = " ".join(label)
    result = resolve_preset_label(text, now)
    if result is None:
        _fail(ValueError(f"Unknown preset: {text!r}"))
    click.echo(combine(result.day, result.at).to_iso())


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def presets(ctx, as_json: bool):
    """List the quick-pick presets for now."""
    config, now = _setup(ctx)
    options = quick_options(now, tuple(config.quick_weeks))

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "label": o.label,
                        "value": combine(o.result.day, o.result.at).to_iso(),
                        "suffix": o.suffix,
                    }
                    for o in options
                ],
                indent=2,
            )
        )
        return

    for o in options:
        click.echo(f"{o.label:14} {o.suffix:10} {combine(o.result.day, o.result.at).to_iso()}")


@main.command("occurrences")
@click.argument("pattern_text", metavar="PATTERN")
@click.option("--anchor", "-a", required=True, help="First date of the series")
@click.option("--from", "from_text", default=None, help="Window start (defaults to today)")
@click.option("--to", "to_text", default=None, help="Window end (defaults to OCCURRENCE_WINDOW_DAYS from start)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def occurrences_cmd(ctx, pattern_text: str, anchor: str, from_text: str | None, to_text: str | None, as_json: bool):
    """List occurrences of a stored PATTERN (e.g. "FREQ=WEEKLY;BYDAY=MO,TH")."""
    config, now = _setup(ctx)
    today = now.date()
    try:
        pattern = require_pattern(pattern_text)
        anchor_date = require_date(anchor, today, config)
        start = require_date(from_text, today, config) if from_text else today
        end = require_date(to_text, today, config) if to_text else default_window(start, config)[1]
    except DatewiseError as e:
        _fail(e)

    dates = occurrences(pattern, anchor_date, start, end)

    if as_json:
        click.echo(json.dumps([d.isoformat() for d in dates], indent=2))
        return

    if not dates:
        click.echo("No occurrences in range.")
        return

    for d in dates:
        click.echo(f"{d.isoformat()}  {d.strftime('%a')}")


@main.command("next")
@click.argument("pattern_text", metavar="PATTERN")
@click.option("--anchor", "-a", required=True, help="First date of the series")
@click.option("--after", default=None, help="Find the first occurrence after this date (defaults to today)")
@click.pass_context
def next_cmd(ctx, pattern_text: str, anchor: str, after: str | None):
    """Show the next occurrence of PATTERN."""
    config, now = _setup(ctx)
    today = now.date()
    try:
        pattern = require_pattern(pattern_text)
        anchor_date = require_date(anchor, today, config)
        after_date = require_date(after, today, config) if after else today
    except DatewiseError as e:
        _fail(e)

    nxt = next_occurrence(pattern, anchor_date, after_date)
    if nxt is None:
        click.echo("Recurrence has ended.")
        return
    click.echo(nxt.isoformat())


@main.command()
@click.argument("pattern_text", metavar="PATTERN")
@click.option("--anchor", "-a", default=None, help="First date of the series")
@click.pass_context
def describe(ctx, pattern_text: str, anchor: str | None):
    """Describe PATTERN in words and show its canonical form."""
    config, now = _setup(ctx)
    try:
        pattern = require_pattern(pattern_text)
        anchor_date = require_date(anchor, now.date(), config) if anchor else None
    except DatewiseError as e:
        _fail(e)
    click.echo(describe_pattern(pattern, anchor_date))
    click.echo(serialize_pattern(pattern))


def _render_month(view: PickerView) -> None:
    """Print a month grid; occurrences are starred, today is bracketed."""
    click.echo(view.title.center(7 * 4))
    click.echo("".join(f"{h:>4}" for h in WEEKDAY_HEADERS))
    for row in view.rows:
        line = ""
        for cell in row:
            mark = "*" if cell.date in view.highlighted else " "
            text = f"{cell.date.day:>2}{mark}"
            if cell.date == view.today:
                text = f"[{cell.date.day:>2}]"
            cell_text = f"{text:>4}"
            if not cell.in_current_month:
                cell_text = click.style(cell_text, dim=True)
            line += cell_text
        click.echo(line)


@main.command()
@click.argument("year", type=int, required=False)
@click.argument("month", type=int, required=False)
@click.option("--due", default=None, help="Due date anchoring the recurrence")
@click.option("--pattern", "pattern_text", default=None, help="Stored recurrence pattern to highlight")
@click.pass_context
def month(ctx, year: int | None, month: int | None, due: str | None, pattern_text: str | None):
    """Show a month calendar, highlighting recurrence occurrences."""
    config, now = _setup(ctx)
    if year is None:
        year = now.year
    if month is None:
        month = now.month
    if not 1 <= month <= 12:
        _fail(ValueError(f"month must be 1-12, got {month}"))

    due_value = None
    try:
        if due:
            due_value = combine(require_date(due, now.date(), config))
        if pattern_text:
            require_pattern(pattern_text)
    except DatewiseError as e:
        _fail(e)

    try:
        view = build_picker_view(now, year, month, due=due_value, stored_pattern=pattern_text, config=config)
    except DatewiseError as e:
        _fail(e)
    _render_month(view)
    if view.recurrence is not None and due_value is not None:
        click.echo()
        click.echo(describe_pattern(view.recurrence, due_value.day))


if __name__ == "__main__":
    main()
