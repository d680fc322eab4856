"""PDF itinerary export rendered with fpdf2.

Layout on A4 (210 x 297 mm): a 60 mm hero band carrying the cover image (or a
solid blue fill) with title, destination, dates and budget; then one blue
header bar per day and one card per activity. Vertical layout is tracked by
hand, so page breaks happen at fixed offsets rather than through fpdf's
automatic breaking.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re

from fpdf import FPDF
from fpdf.enums import MethodReturnValue

from backend.app.export.common import (
    BRAND,
    NO_ACTIVITIES_TEXT,
    budget_label,
    cost_label,
    date_range_label,
    day_number,
    days_with_activities,
    format_short_date,
    format_time,
    maps_search_url,
)
from backend.app.models.itinerary import ActivityV1, TripV1

logger = logging.getLogger(__name__)

PAGE_WIDTH = 210
HERO_HEIGHT = 60
CONTENT_X = 14
CONTENT_WIDTH = 182
DAY_BREAK_Y = 240
ACTIVITY_BREAK_Y = 255
TEXT_BOTTOM_Y = 280
TOP_Y = 20
MAX_THUMBNAILS = 4

BLUE = (41, 128, 185)
WHITE = (255, 255, 255)
CARD = (248, 249, 250)
BADGE = (230, 230, 230)
DARK = (30, 30, 30)
MUTED = (80, 80, 80)
GREEN = (34, 139, 34)
FOOTER_GREY = (150, 150, 150)

_DATA_URL = re.compile(r"^data:image/[\w.+-]+;base64,(?P<payload>.+)$", re.DOTALL)


def to_latin1(text: str) -> str:
    """Core PDF fonts are latin-1 only; drop what they cannot encode."""
    return text.encode("latin-1", "ignore").decode("latin-1")


def decode_data_url(value: str | None) -> bytes | None:
    """Raw bytes of a base64 ``data:image/...`` URL, or None."""
    if not value:
        return None
    match = _DATA_URL.match(value.strip())
    if not match:
        return None
    try:
        return base64.b64decode(match.group("payload"), validate=False)
    except (binascii.Error, ValueError):
        return None


class ItineraryPDF(FPDF):
    """A4 document with the brand and page counter in every footer."""

    def __init__(self, brand: str = BRAND) -> None:
        super().__init__(orientation="P", unit="mm", format="A4")
        self.brand = brand
        self.set_auto_page_break(False)
        self.set_margins(CONTENT_X, TOP_Y, CONTENT_X)

    def footer(self) -> None:
        self.set_font("helvetica", "", 8)
        self.set_text_color(*FOOTER_GREY)
        self.text(CONTENT_X, 288, to_latin1(self.brand))
        # The {nb} alias is only substituted in cell output
        self.set_xy(CONTENT_X, 285)
        self.cell(CONTENT_WIDTH, 4, text=f"Page {self.page_no()}/{{nb}}", align="R")

    def right_text(self, x_right: float, y: float, text: str) -> None:
        self.text(x_right - self.get_string_width(text), y, text)

    def centered_text(self, x_center: float, y: float, text: str) -> None:
        self.text(x_center - self.get_string_width(text) / 2, y, text)

    def try_image(self, data: bytes, x: float, y: float, w: float, h: float) -> bool:
        """Draw an image; undecodable payloads are skipped."""
        try:
            self.image(io.BytesIO(data), x=x, y=y, w=w, h=h)
        except Exception as e:  # fpdf/Pillow raise a variety of decode errors
            logger.debug("skipping undecodable image", extra={"error": str(e)})
            return False
        return True


def _draw_hero(pdf: ItineraryPDF, trip: TripV1) -> None:
    cover = decode_data_url(trip.cover_image)
    if cover is not None and pdf.try_image(cover, 0, 0, PAGE_WIDTH, HERO_HEIGHT):
        # Dark strip keeps overlay text readable on the photo
        pdf.set_fill_color(0, 0, 0)
        pdf.rect(0, 40, PAGE_WIDTH, 20, style="F")
    else:
        pdf.set_fill_color(*BLUE)
        pdf.rect(0, 0, PAGE_WIDTH, HERO_HEIGHT, style="F")

    pdf.set_text_color(*WHITE)
    pdf.set_font("helvetica", "B", 28)
    pdf.text(CONTENT_X, 25, to_latin1(trip.title))
    pdf.set_font("helvetica", "", 14)
    pdf.text(CONTENT_X, 38, to_latin1(trip.destination or ""))
    pdf.set_font("helvetica", "", 11)
    pdf.text(CONTENT_X, 50, date_range_label(trip))
    budget = budget_label(trip)
    if budget:
        pdf.right_text(180, 50, to_latin1(f"Budget: {budget}"))


def _description_lines(pdf: ItineraryPDF, text: str) -> list[str]:
    pdf.set_font("helvetica", "", 8)
    return pdf.multi_cell(
        175, 4, to_latin1(text), dry_run=True, output=MethodReturnValue.LINES
    )


def _draw_activity(pdf: ItineraryPDF, trip: TripV1, activity: ActivityV1, y: float) -> float:
    thumbnails = [d for d in (decode_data_url(i) for i in activity.images) if d][:MAX_THUMBNAILS]

    pdf.set_fill_color(*CARD)
    pdf.rect(CONTENT_X, y - 3, CONTENT_WIDTH, 38 if thumbnails else 22, style="F")

    time_str = format_time(activity.start_time)
    if time_str:
        pdf.set_fill_color(*BLUE)
        pdf.rect(16, y - 1, 18, 6, style="F")
        pdf.set_text_color(*WHITE)
        pdf.set_font("helvetica", "B", 8)
        pdf.centered_text(25, y + 3, time_str)

    pdf.set_font("helvetica", "B", 11)
    pdf.set_text_color(*DARK)
    pdf.text(38 if time_str else 18, y + 3, to_latin1(activity.title))

    pdf.set_fill_color(*BADGE)
    pdf.rect(165, y - 1, 28, 6, style="F")
    pdf.set_text_color(*MUTED)
    pdf.set_font("helvetica", "", 7)
    pdf.centered_text(179, y + 3, to_latin1(activity.type.upper()))
    y += 8

    if activity.location:
        pdf.set_font("helvetica", "", 9)
        pdf.set_text_color(*BLUE)
        label = to_latin1(f"> {activity.location} (View on Maps)")
        pdf.text(18, y, label)
        pdf.link(18, y - 3.5, pdf.get_string_width(label), 5, maps_search_url(activity.location))
        y += 5

    if activity.description:
        lines = _description_lines(pdf, activity.description)
        pdf.set_text_color(*MUTED)
        for line in lines:
            if y > TEXT_BOTTOM_Y:
                pdf.add_page()
                y = TOP_Y
                pdf.set_font("helvetica", "", 8)
                pdf.set_text_color(*MUTED)
            pdf.text(18, y, line)
            y += 4

    cost = cost_label(activity, trip)
    if cost:
        pdf.set_font("helvetica", "B", 9)
        pdf.set_text_color(*GREEN)
        pdf.text(18, y, to_latin1(cost))
        y += 4

    if thumbnails:
        x = 18
        for data in thumbnails:
            if pdf.try_image(data, x, y, 30, 22):
                x += 34
        y += 26

    return y + 8


def export_pdf(trip: TripV1, brand: str = BRAND) -> bytes:
    """Render a trip as a PDF document."""
    pdf = ItineraryPDF(brand=brand)
    pdf.add_page()
    _draw_hero(pdf, trip)
    y = 70

    days = days_with_activities(trip)
    if not days:
        pdf.set_text_color(100, 100, 100)
        pdf.set_font("helvetica", "", 14)
        pdf.text(CONTENT_X, y, NO_ACTIVITIES_TEXT)

    for day in days:
        if y > DAY_BREAK_Y:
            pdf.add_page()
            y = TOP_Y

        pdf.set_fill_color(*BLUE)
        pdf.rect(CONTENT_X, y - 5, CONTENT_WIDTH, 12, style="F")
        pdf.set_text_color(*WHITE)
        pdf.set_font("helvetica", "B", 11)
        pdf.text(18, y + 3, f"Day {day_number(day)} - {format_short_date(day.date)}")
        y += 16

        for activity in day.activities:
            if y > ACTIVITY_BREAK_Y:
                pdf.add_page()
                y = TOP_Y
            y = _draw_activity(pdf, trip, activity, y)
        y += 6

    return bytes(pdf.output())
