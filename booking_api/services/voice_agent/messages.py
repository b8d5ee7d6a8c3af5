# ============================================================================
# booking_api/services/voice_agent/messages.py
# ============================================================================
"""
German sentences read out by the voice agent.

Every sentence names the concrete date and time it is about so it stays
accurate when the agent paraphrases it.
"""
from datetime import date
from typing import List, Optional

from booking_api.utils.date_parsing import format_german_date


def _staff_suffix(staff_name: Optional[str]) -> str:
    return f" bei {staff_name}" if staff_name else ""


def slot_available(day: date, time_str: str, staff_name: Optional[str] = None) -> str:
    return f"Der Termin am {format_german_date(day)} um {time_str} Uhr ist verfügbar{_staff_suffix(staff_name)}."


def slot_taken(day: date, time_str: str, staff_name: Optional[str] = None) -> str:
    return (
        f"Leider ist der Termin am {format_german_date(day)} um {time_str} Uhr "
        f"bereits vergeben{_staff_suffix(staff_name)}."
    )


def alternatives(day: date, slots: List[str]) -> str:
    if slots:
        return f"Alternativ hätte ich am {format_german_date(day)} folgende Zeiten frei: {', '.join(slots)} Uhr."
    return f"Am {format_german_date(day)} sind leider keine Termine mehr frei."


def available_slots(day: date, slots: List[str], staff_name: Optional[str] = None) -> str:
    if slots:
        return (
            f"Am {format_german_date(day)} sind folgende Termine verfügbar{_staff_suffix(staff_name)}: "
            f"{', '.join(slots)} Uhr."
        )
    return f"Am {format_german_date(day)} sind leider keine Termine mehr frei{_staff_suffix(staff_name)}."


def short_status(time_str: str, available: bool, staff_name: Optional[str] = None) -> str:
    """19:00 Uhr ist verfügbar / belegt"""
    state = "verfügbar" if available else "belegt"
    return f"{time_str} Uhr ist {state}{_staff_suffix(staff_name)}"


def booked(day: date, time_str: str, staff_name: Optional[str] = None) -> str:
    return f"Perfekt! Ich habe den Termin am {format_german_date(day)} um {time_str} Uhr{_staff_suffix(staff_name)} für Sie gebucht."


def confirmation(day: date, time_str: str) -> str:
    return f"Terminbestätigung: {format_german_date(day)}, {time_str} Uhr"


def booking_failed(day: date, time_str: str) -> str:
    return (
        f"Der Termin am {format_german_date(day)} um {time_str} Uhr konnte nicht bestätigt werden. "
        f"Bitte prüfen Sie, ob die Buchung angelegt wurde, bevor Sie es erneut versuchen."
    )
