from __future__ import annotations

from html import escape

from .classifier import (
    event_date_label,
    friendly_name_with_year,
    is_championship,
    is_district_championship,
    sort_events,
    week_label,
)
from .models import Event


def group_by_week(events: list[Event]) -> list[tuple[str, list[Event]]]:
    # A label keeps the position of its first event in sorted order.
    sections: dict[str, list[Event]] = {}
    for event in sort_events(events):
        sections.setdefault(week_label(event), []).append(event)
    return list(sections.items())


def format_events(events: list[Event]) -> str:
    if not events:
        return "No events found for that season."

    lines = ["<b>Events found</b>", "Select one from the buttons below:"]
    idx = 0
    for label, section in group_by_week(events):
        lines.append(f"\n<b>{escape(label)}</b>")
        for event in section:
            idx += 1
            name = event.short_name or event.name or event.key
            date = event_date_label(event) or "TBD"
            lines.append(
                f"{idx}. <b>{escape(name)}</b>\n"
                f"   Date: {escape(date)}\n"
                f"   Location: {escape(event.location or 'TBD')}"
            )
    return "\n".join(lines)


def format_event(event: Event) -> str:
    lines = [
        f"<b>{escape(friendly_name_with_year(event))}</b>",
        f"Key: <code>{escape(event.key)}</code>",
        f"Week: {escape(week_label(event))}",
        f"Date: {escape(event_date_label(event) or 'TBD')}",
        f"Location: {escape(event.location or 'TBD')}",
    ]
    if is_championship(event):
        lines.append("Championship event")
    elif is_district_championship(event):
        district = f" ({event.district_key})" if event.district_key else ""
        lines.append(f"District championship{escape(district)}")

    if event.has_website:
        lines.append(f"Website: {escape(event.website or '')}")

    if event.webcasts:
        lines.append("\n<b>Webcasts</b>")
        for webcast in event.webcasts:
            when = f" ({webcast.date})" if webcast.date else ""
            lines.append(f"- {escape(webcast.type)}: {escape(webcast.channel)}{escape(when)}")
    return "\n".join(lines)
