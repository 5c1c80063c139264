"""Formatting and prompt helpers shared by commands."""

import click

from tasktracker.core.errors import NotFound, ParseError, ValidationError
from tasktracker.core.reconciler import FieldChange
from tasktracker.core.session import Session
from tasktracker.core.store import SessionStore
from tasktracker.core.timefmt import (
    format_duration,
    format_money,
    format_timestamp,
    parse_rate,
    parse_timestamp,
    parse_title,
)


def _value_proc(parse):
    """Wrap a parser so click.prompt re-prompts on bad input."""

    def proc(text: str):
        try:
            return parse(text)
        except (ParseError, ValidationError) as e:
            raise click.BadParameter(str(e)) from e

    return proc


title_value = _value_proc(parse_title)
rate_value = _value_proc(parse_rate)
timestamp_value = _value_proc(parse_timestamp)


def load_or_exit(store: SessionStore, session_id: int) -> Session:
    """Load a session or print an error and exit 1."""
    try:
        return store.get(session_id)
    except NotFound:
        click.echo(f"Session {session_id} not found", err=True)
        raise SystemExit(1)


def format_time(session: Session, field: str) -> str:
    value = getattr(session, field)
    return format_timestamp(value) if value else "-"


def format_line(session: Session) -> str:
    """One-line summary of a session."""
    return (
        f"{session.id:>4}  {session.title}  "
        f"{format_time(session, 'start_time')} - {format_time(session, 'end_time')}  "
        f"{format_duration(session.duration_seconds)}  "
        f"{format_money(session.hourly_rate)}/h  {format_money(session.earnings)}"
    )


def format_details(session: Session) -> str:
    """Multi-line description of a session."""
    lines = [
        f"ID:          {session.id}",
        f"External ID: {session.external_id}",
        f"Title:       {session.title}",
        f"Description: {session.description or '-'}",
        f"Start:       {format_time(session, 'start_time')}",
        f"End:         {format_time(session, 'end_time')}",
        f"Duration:    {format_duration(session.duration_seconds)}",
        f"Rate:        {format_money(session.hourly_rate)}/h",
        f"Earnings:    {format_money(session.earnings)}",
        f"Created by:  {session.created_by}",
    ]
    return "\n".join(lines)


def session_to_dict(session: Session) -> dict:
    """JSON-ready representation of a session."""
    return {
        "id": session.id,
        "external_id": session.external_id,
        "title": session.title,
        "description": session.description,
        "start_time": format_timestamp(session.start_time),
        "end_time": format_timestamp(session.end_time) if session.end_time else None,
        "duration_seconds": session.duration_seconds,
        "hourly_rate": session.hourly_rate,
        "earnings": session.earnings,
        "created_by": session.created_by,
    }


def _display(field: str, value) -> str:
    if value is None or value == "":
        return "-"
    if field in {"start_time", "end_time"}:
        return format_timestamp(value)
    if field == "hourly_rate":
        return f"{format_money(value)}/h"
    return str(value)


def describe_change(session: Session, change: FieldChange) -> str:
    """Describe a pending edit against the stored session."""
    lines = [
        f"{change.field}: {_display(change.field, getattr(session, change.field))}"
        f" -> {_display(change.field, change.value)}"
    ]
    if change.duration_seconds is not None:
        lines.append(
            f"duration: {format_duration(session.duration_seconds)}"
            f" -> {format_duration(change.duration_seconds)}"
        )
    if change.earnings is not None:
        lines.append(
            f"earnings: {format_money(session.earnings)} -> {format_money(change.earnings)}"
        )
    return "\n".join(lines)
