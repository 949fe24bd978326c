"""JamGuide CLI - find live music jam sessions."""

import json
import logging
import sys
from datetime import date
from functools import wraps
from pathlib import Path

import click

from .adapters.supabase_rest import BackendError
from .config import load_config
from .core.claims import pending_first
from .core.filters import (
    GENRE_OPTIONS,
    FREQUENCY_OPTIONS,
    REGION_OPTIONS,
    SKILL_LEVEL_OPTIONS,
    TIME_OF_DAY_OPTIONS,
    JamFilters,
    expand_slugs,
)
from .core.grid import render_month_text, resolve_month
from .core.jams import SubmissionError, notable_ids
from .core.reviews import HAPPENED_CHOICES, ReviewError, format_rating
from .core.schedule import normalize_day
from .workflows import (
    ClaimError,
    NotAuthorizedError,
    NotFoundError,
    add_review,
    approve_claim,
    claim_jam,
    get_jam,
    get_repositories,
    list_jams,
    load_reviews,
    month_calendar,
    my_jams,
    reject_claim,
    submit_jam,
    update_jam,
)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _repos():
    try:
        return get_repositories(load_config())
    except BackendError as e:
        _fail(str(e))


def _handle_errors(func):
    """Turn expected failures into an error message and exit code 1."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (BackendError, SubmissionError, NotFoundError, NotAuthorizedError, ClaimError, ReviewError) as e:
            _fail(str(e))

    return wrapper


def _parse_pairs(pairs: tuple[str, ...], option: str) -> dict:
    result = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint=option)
        key, _, value = pair.partition("=")
        result[key.strip()] = value.strip()
    return result


def _day_values(days: tuple[str, ...]) -> tuple[str, ...]:
    """Day filter values, covering the "Thur" spelling found in stored data."""
    values: list[str] = []
    for raw in days:
        key = normalize_day(raw) or raw
        for v in (key, "Thur") if key == "Thu" else (key,):
            if v not in values:
                values.append(v)
    return tuple(values)


def filter_options(func):
    """Shared filter options for listing commands."""
    options = [
        click.option("--region", multiple=True, help="Region slug (sf, east_bay, north_bay, ...)"),
        click.option("--city", multiple=True, help="City name"),
        click.option("--dow", multiple=True, help="Day of week (Mon, Tue, ...)"),
        click.option("--tod", multiple=True, help="Time of day (daytime, evening, nighttime)"),
        click.option("--genre", multiple=True, help="Genre slug (bluegrass, jazz, jam_band)"),
        click.option("--skill", multiple=True, help="Skill slug (beginner_friendly, mixed, advanced, pro)"),
        click.option("--freq", multiple=True, help="Frequency slug (weekly, biweekly, monthly, ...)"),
        click.option("--kind", multiple=True, help="Event kind (jam_session, concert, ...)"),
        click.option("--house-jam", is_flag=True, help="Only house jams"),
        click.option("--dancing", is_flag=True, help="Only jams with dancing"),
        click.option("--notable", is_flag=True, help="Only notable jams"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_filters(region, city, dow, tod, genre, skill, freq, kind, house_jam, dancing) -> JamFilters:
    return JamFilters(
        region=tuple(expand_slugs(REGION_OPTIONS, list(region))),
        city=tuple(city),
        day_of_week=_day_values(dow),
        time_of_day=tuple(expand_slugs(TIME_OF_DAY_OPTIONS, list(tod))),
        primary_genre=tuple(expand_slugs(GENRE_OPTIONS, list(genre))),
        skill_level=tuple(expand_slugs(SKILL_LEVEL_OPTIONS, list(skill))),
        frequency=tuple(expand_slugs(FREQUENCY_OPTIONS, list(freq))),
        event_kind=tuple(kind),
        is_house_jam=house_jam,
        includes_dancing=dancing,
    )


def _jam_json(jam) -> dict:
    return {
        "id": jam.id,
        "event_name": jam.event_name,
        "venue_name": jam.venue_name,
        "city": jam.city,
        "region": jam.region,
        "day_of_week": jam.day_of_week,
        "start_time": jam.start_time,
        "frequency": jam.frequency,
        "primary_genre": jam.primary_genre,
        "skill_level": jam.skill_level,
    }


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """JamGuide - find live music jam sessions."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command("list")
@filter_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_handle_errors
def list_cmd(notable: bool, as_json: bool, **filter_kwargs):
    """List active jams."""
    jams = list_jams(_repos(), _build_filters(**filter_kwargs))
    highlighted = notable_ids(jams)
    if notable:
        jams = [j for j in jams if j.id in highlighted]

    if as_json:
        click.echo(json.dumps([dict(_jam_json(j), notable=j.id in highlighted) for j in jams], indent=2))
        return

    if not jams:
        click.echo("No jams match these filters.")
        return

    for jam in jams:
        star = "*" if jam.id in highlighted else " "
        click.echo(f"{star} [{jam.id}] {jam.display_name}")
        click.echo(f"    {jam.summary_line()}")
        details = " • ".join(p for p in (jam.primary_genre, jam.skill_level, jam.event_kind) if p)
        if details:
            click.echo(f"    {details}")


@main.command()
@click.option("--year", default=None, help="Year (defaults to this year)")
@click.option("--month", default=None, help="Month 1-12 (defaults to this month)")
@filter_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_handle_errors
def calendar(year: str | None, month: str | None, notable: bool, as_json: bool, **filter_kwargs):
    """Show which jams happen on each day of a month."""
    today = date.today()
    target_year, target_month = resolve_month(year, month, today)

    grid = month_calendar(_repos(), target_year, target_month, _build_filters(**filter_kwargs), today)
    if notable:
        for cell in grid.days():
            highlighted = notable_ids(cell.jams)
            cell.jams = [j for j in cell.jams if j.id in highlighted]

    if as_json:
        click.echo(
            json.dumps(
                {
                    "year": grid.year,
                    "month": grid.month,
                    "label": grid.label,
                    "days": [
                        {
                            "date": cell.day.isoformat(),
                            "jams": [_jam_json(j) for j in cell.jams],
                        }
                        for cell in grid.days()
                    ],
                },
                indent=2,
            )
        )
        return

    click.echo(render_month_text(grid))
    prev_year, prev_month = grid.previous_month()
    next_year, next_month = grid.next_month()
    click.echo(
        f"\nPrevious: --year {prev_year} --month {prev_month}   "
        f"Next: --year {next_year} --month {next_month}"
    )


@main.command()
@click.argument("jam_id", type=int)
@_handle_errors
def show(jam_id: int):
    """Show a jam with its reviews."""
    repos = _repos()
    jam = get_jam(repos, jam_id)

    click.echo(jam.display_name)
    click.echo(f"  {jam.summary_line()}")
    if jam.start_time:
        end = f"-{jam.end_time[:5]}" if jam.end_time else ""
        click.echo(f"  Time: {jam.format_start_time()}{end}")
    for label, key in (("Description", "event_description"), ("Website", "website_url"), ("Contact", "contact_email")):
        if jam.row.get(key):
            click.echo(f"  {label}: {jam.row[key]}")

    view = load_reviews(repos, jam_id)
    click.echo("\nReviews & Ratings")
    if view.error:
        click.echo(f"  {view.error}")
        return

    s = view.summary
    click.echo(
        f"  Overall {format_rating(s.overall)} • Networking {format_rating(s.networking)} "
        f"• Accuracy {format_rating(s.accuracy)} ({s.count} reviews)"
    )
    click.echo(f"  Check-ins: {s.checkins} happening, {s.negative_checkins} not happening")
    for review in view.reviews[:5]:
        who = review.display_name or "Anonymous"
        click.echo(f"\n  {who} - {review.format_date()} - {review.happened_label}")
        if review.comments:
            click.echo(f"    {review.comments}")


@main.command()
@click.option("--field", "fields", multiple=True, help="Jam field as key=value")
@click.option("--from-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="JSON file with jam fields")
@_handle_errors
def submit(fields: tuple[str, ...], from_file: Path | None):
    """Submit a new jam (published immediately)."""
    form: dict = {}
    if from_file:
        try:
            form.update(json.loads(from_file.read_text()))
        except json.JSONDecodeError as e:
            _fail(f"Invalid JSON in {from_file}: {e}")
    form.update(_parse_pairs(fields, "--field"))

    jam_id = submit_jam(_repos(), form)
    click.echo(f"✓ Jam submitted (id {jam_id})")


@main.command()
@click.argument("jam_id", type=int)
@click.option("--user", "user_id", required=True, help="Your user id")
@click.option("--set", "changes", multiple=True, required=True, help="Field to change as key=value")
@_handle_errors
def edit(jam_id: int, user_id: str, changes: tuple[str, ...]):
    """Edit a jam you own."""
    jam = update_jam(_repos(), jam_id, user_id, _parse_pairs(changes, "--set"))
    click.echo(f"✓ Updated {jam.display_name}")


@main.command()
@click.argument("jam_id", type=int)
@click.option("--user", "user_id", required=True, help="Your user id")
@click.option("--phone", required=True, help="Phone number used to verify the claim")
@click.option("--notes", default="", help="Anything that helps verify you run this jam")
@_handle_errors
def claim(jam_id: int, user_id: str, phone: str, notes: str):
    """Claim ownership of a jam."""
    claim_jam(_repos(), jam_id, user_id, phone, notes)
    click.echo("✓ Claim submitted for review")


@main.group()
def claims():
    """Review ownership claims."""
    pass


@claims.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_handle_errors
def claims_list(as_json: bool):
    """List claims, pending first."""
    all_claims = pending_first(_repos().claims.fetch_all())

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": c.id,
                        "jam_id": c.jam_id,
                        "event_name": c.event_name,
                        "user_id": c.user_id,
                        "phone_number": c.phone_number,
                        "notes": c.notes,
                        "status": c.status.value,
                        "created_at": c.created_at,
                    }
                    for c in all_claims
                ],
                indent=2,
            )
        )
        return

    if not all_claims:
        click.echo("No claims.")
        return

    for c in all_claims:
        click.echo(f"[{c.id}] {c.status.value:8} {c.event_name or f'jam {c.jam_id}'} <- {c.user_id} ({c.phone_number or 'no phone'})")
        if c.notes:
            click.echo(f"    {c.notes}")


@claims.command("approve")
@click.argument("claim_id", type=int)
@_handle_errors
def claims_approve(claim_id: int):
    """Approve a claim and transfer ownership."""
    c = approve_claim(_repos(), claim_id)
    click.echo(f"✓ Claim {c.id} approved; jam {c.jam_id} now owned by {c.user_id}")


@claims.command("reject")
@click.argument("claim_id", type=int)
@_handle_errors
def claims_reject(claim_id: int):
    """Reject a claim."""
    c = reject_claim(_repos(), claim_id)
    click.echo(f"✓ Claim {c.id} rejected")


@main.command()
@click.argument("jam_id", type=int)
@click.option("--overall", type=click.IntRange(1, 5), default=4, show_default=True)
@click.option("--networking", type=click.IntRange(1, 5), default=4, show_default=True)
@click.option("--accuracy", type=click.IntRange(1, 5), default=4, show_default=True)
@click.option("--happened", type=click.Choice(list(HAPPENED_CHOICES)), default="yes", show_default=True)
@click.option("--name", "display_name", default=None, help="Name to show with the review")
@click.option("--comments", default=None)
@_handle_errors
def review(jam_id: int, overall: int, networking: int, accuracy: int, happened: str, display_name: str | None, comments: str | None):
    """Rate a jam."""
    add_review(
        _repos(),
        jam_id,
        overall=overall,
        networking=networking,
        accuracy=accuracy,
        happened=happened,
        display_name=display_name,
        comments=comments,
    )
    click.echo("✓ Review saved")


@main.command("my-jams")
@click.option("--user", "user_id", required=True, help="Your user id")
@_handle_errors
def my_jams_cmd(user_id: str):
    """Show jams you own and claims you've made."""
    result = my_jams(_repos(), user_id)

    click.echo("Your jams:")
    if not result.owned:
        click.echo("  None yet. Claim a jam to manage it.")
    for jam in result.owned:
        click.echo(f"  [{jam.id}] {jam.display_name}")

    click.echo("\nYour claims:")
    if not result.claims:
        click.echo("  None.")
    for c in result.claims:
        click.echo(f"  {c.event_name or f'jam {c.jam_id}'}: {c.status.value}")


if __name__ == "__main__":
    main()
