import uuid
from datetime import datetime

from wewinbid.modules.calendar.db.schema import CalendarEvent, EventReminder, EventTypeEnum
from wewinbid.modules.calendar.services.ics_service import escape_ics_text, generate_ics


def test_escape_special_characters():
    assert escape_ics_text("a;b,c\\d\ne") == "a\\;b\\,c\\\\d\\ne"
    assert escape_ics_text(None) == ""


def test_generate_calendar():
    event = CalendarEvent(
        id=uuid.uuid4(),
        title="Remise offre, lot 2",
        description="Dépôt sur la plateforme",
        event_type=EventTypeEnum.deadline,
        start_date=datetime(2026, 5, 4, 10, 0),
        color="#EF4444",
        reminders=[EventReminder(minutes_before=1440, scheduled_for=datetime(2026, 5, 3, 10, 0))],
    )
    ics = generate_ics([event], now=datetime(2026, 4, 1, 8, 30))

    lines = ics.split("\r\n")
    assert lines[0] == "BEGIN:VCALENDAR"
    assert lines[-1] == "END:VCALENDAR"
    assert f"UID:{event.id}@wewinbid.com" in lines
    assert "DTSTAMP:20260401T083000Z" in lines
    assert "DTSTART:20260504T100000Z" in lines
    assert "DTEND:20260504T110000Z" in lines
    assert "SUMMARY:Remise offre\\, lot 2" in lines
    assert "TRIGGER:-PT1440M" in lines
    assert "STATUS:CONFIRMED" in lines


def test_empty_calendar():
    ics = generate_ics([], now=datetime(2026, 4, 1))
    assert "BEGIN:VEVENT" not in ics
    assert "X-WR-CALNAME:WeWinBid Events" in ics
