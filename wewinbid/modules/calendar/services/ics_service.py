from datetime import datetime, timedelta
from typing import Iterable, Optional

from wewinbid.core.helpers import utcnow
from wewinbid.modules.calendar.db.schema import CalendarEvent, EventTypeEnum

CALENDAR_NAME = "WeWinBid Events"


def format_ics_date(value: datetime) -> str:
    return value.strftime("%Y%m%dT%H%M%SZ")


def escape_ics_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def event_to_ics_lines(event: CalendarEvent, stamp: str) -> list[str]:
    end = event.end_date or event.start_date + timedelta(hours=1)
    lines = [
        "BEGIN:VEVENT",
        f"UID:{event.id}@wewinbid.com",
        f"DTSTAMP:{stamp}",
        f"DTSTART:{format_ics_date(event.start_date)}",
        f"DTEND:{format_ics_date(end)}",
        f"SUMMARY:{escape_ics_text(event.title)}",
    ]
    if event.description:
        lines.append(f"DESCRIPTION:{escape_ics_text(event.description)}")
    if event.location:
        lines.append(f"LOCATION:{escape_ics_text(event.location)}")
    if event.color:
        lines.append(f"COLOR:{event.color}")
    for reminder in event.reminders:
        lines.extend([
            "BEGIN:VALARM",
            "ACTION:DISPLAY",
            f"DESCRIPTION:Reminder: {escape_ics_text(event.title)}",
            f"TRIGGER:-PT{reminder.minutes_before}M",
            "END:VALARM",
        ])
    if event.recurrence_rule:
        lines.append(f"RRULE:{event.recurrence_rule}")
    lines.append("STATUS:CONFIRMED" if event.event_type == EventTypeEnum.deadline else "STATUS:TENTATIVE")
    lines.append("END:VEVENT")
    return lines


def generate_ics(events: Iterable[CalendarEvent], now: Optional[datetime] = None) -> str:
    stamp = format_ics_date(now or utcnow())
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//WeWinBid//Calendar//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{CALENDAR_NAME}",
        "X-WR-TIMEZONE:UTC",
    ]
    for event in events:
        lines.extend(event_to_ics_lines(event, stamp))
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines)
