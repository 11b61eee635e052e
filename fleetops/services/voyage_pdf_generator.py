"""
Voyage Log PDF Generator
Builds the printable voyage report a vessel master signs off
"""

import io
import logging
from datetime import datetime
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..config import VOYAGE_REPORT_AUTHORITY
from ..domain.voyages.schemas import VOYAGE_TYPE_LABELS, VoyageSummary
from ..models_voyage import VoyageLog

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = letter
MARGIN = 0.6 * inch


def _fmt_dt(value) -> str:
    if not value:
        return "-"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value.strftime("%Y-%m-%d %H:%M")


def _text(value) -> str:
    if value is None or value == "":
        return "-"
    return escape(str(value))


class NumberedCanvas(canvas.Canvas):
    """Canvas that knows the page count, so the footer can say 'Page i of n'"""

    voyage_number = ""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int):
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.grey)
        self.drawCentredString(
            PAGE_WIDTH / 2,
            MARGIN / 2,
            f"Page {self._pageNumber} of {total} | Voyage Log: {self.voyage_number} | "
            f"{VOYAGE_REPORT_AUTHORITY} Compliant",
        )


class VoyagePDFGenerator:
    """Generate the voyage log report"""

    def __init__(self, voyage: VoyageLog, summary: VoyageSummary, entered_by_name: Optional[str] = None):
        self.voyage = voyage
        self.summary = summary
        self.entered_by_name = entered_by_name

        self.content_width = PAGE_WIDTH - (2 * MARGIN)
        self.navy = colors.HexColor("#1e3a5f")
        self.dark_gray = colors.HexColor("#1e293b")
        self.light_gray = colors.HexColor("#f1f5f9")
        self.alert_red = colors.HexColor("#b91c1c")

        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "VoyageTitle", parent=styles["Heading1"], fontSize=20, textColor=self.navy, alignment=1, spaceAfter=4
        )
        self.subtitle_style = ParagraphStyle(
            "VoyageSubtitle", parent=styles["Normal"], fontSize=9, textColor=colors.grey, alignment=1
        )
        self.heading_style = ParagraphStyle(
            "VoyageHeading",
            parent=styles["Heading2"],
            fontSize=12,
            textColor=self.navy,
            spaceBefore=14,
            spaceAfter=6,
        )
        self.body_style = ParagraphStyle(
            "VoyageBody", parent=styles["Normal"], fontSize=9, textColor=self.dark_gray, spaceAfter=4
        )
        self.cell_style = ParagraphStyle("VoyageCell", parent=self.body_style, fontSize=8, spaceAfter=0)

    # ------------------------------------------------------------------
    # Table helpers
    # ------------------------------------------------------------------

    def _key_value_table(self, rows: list[list[str]]) -> Table:
        data = [
            [Paragraph(f"<b>{escape(label)}</b>", self.cell_style), Paragraph(value, self.cell_style)]
            for label, value in rows
        ]
        table = Table(data, colWidths=[1.6 * inch, self.content_width - 1.6 * inch])
        table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                    ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ]
            )
        )
        return table

    def _grid_table(self, header: list[str], rows: list[list[str]], col_widths: list[float], header_color=None) -> Table:
        header_style = ParagraphStyle("HeaderCell", parent=self.cell_style, textColor=colors.white)
        data = [[Paragraph(f"<b>{escape(h)}</b>", header_style) for h in header]]
        data += [[Paragraph(cell, self.cell_style) for cell in row] for row in rows]
        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), header_color or self.navy),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, self.light_gray]),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("LEFTPADDING", (0, 0), (-1, -1), 5),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 5),
                ]
            )
        )
        return table

    def _widths(self, *fractions: float) -> list[float]:
        return [self.content_width * f for f in fractions]

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _identification(self) -> list:
        v = self.voyage
        arrival = (
            f"{_fmt_dt(v.arrival_datetime)} at {_text(v.destination_location)}"
            if v.arrival_datetime
            else f"In Progress (bound for {_text(v.destination_location)})"
        )
        rows = [
            ["Voyage Number", _text(v.voyage_number)],
            ["Vessel", _text(v.vessel.name if v.vessel else None)],
            ["Departure", f"{_fmt_dt(v.departure_datetime)} from {_text(v.origin_location)}"],
            ["Arrival", arrival],
            ["Voyage Type", _text(VOYAGE_TYPE_LABELS.get(v.voyage_type, v.voyage_type))],
            ["Status", _text((v.voyage_status or "").replace("_", " ").upper())],
        ]
        if self.summary.duration_display:
            rows.append(["Duration", self.summary.duration_display])
        return [Paragraph("VOYAGE IDENTIFICATION", self.heading_style), self._key_value_table(rows)]

    def _personnel(self) -> list:
        rows = [["Master", _text(self.voyage.master_name)]]
        for member in self.voyage.crew_members or []:
            rows.append([_text(member.get("role") or "Crew"), _text(member.get("name"))])
        return [
            Paragraph("PERSONNEL", self.heading_style),
            self._grid_table(["Role", "Name"], rows, self._widths(0.35, 0.65)),
        ]

    def _cargo(self) -> list:
        v = self.voyage
        if not (v.barge_name or v.cargo_description or v.cargo_weight):
            return []
        weight = f"{v.cargo_weight:g} {v.cargo_weight_unit or ''}".strip() if v.cargo_weight is not None else None
        rows = [
            ["Barge", _text(v.barge_name)],
            ["Cargo", _text(v.cargo_description)],
            ["Weight", _text(weight)],
        ]
        return [Paragraph("CARGO / TOW DETAILS", self.heading_style), self._key_value_table(rows)]

    def _readings(self) -> list:
        v = self.voyage
        fuel_unit = v.fuel_unit or ""
        rows = [
            [
                "Engine Hours",
                _text(v.engine_hours_start),
                _text(v.engine_hours_end),
                _text(self.summary.engine_hours_used),
            ],
            [
                f"Fuel ({escape(fuel_unit)})" if fuel_unit else "Fuel",
                _text(v.fuel_start),
                _text(v.fuel_end),
                _text(self.summary.fuel_consumed),
            ],
        ]
        return [
            Paragraph("EQUIPMENT READINGS", self.heading_style),
            self._grid_table(["Metric", "Start", "End", "Used/Consumed"], rows, self._widths(0.31, 0.23, 0.23, 0.23)),
        ]

    def _weather(self) -> list:
        weather = self.voyage.weather_conditions or {}
        labels = [
            ("wind_speed", "Wind Speed"),
            ("wind_direction", "Wind Direction"),
            ("visibility", "Visibility"),
            ("sea_state", "Sea State"),
            ("temperature", "Temperature"),
            ("precipitation", "Precipitation"),
        ]
        rows = [[label, _text(weather.get(key))] for key, label in labels if weather.get(key)]
        if not rows:
            return []
        return [Paragraph("WEATHER CONDITIONS", self.heading_style), self._key_value_table(rows)]

    def _communications(self) -> list:
        section = [Paragraph("COMMUNICATIONS LOG", self.heading_style)]
        comms = self.voyage.communications
        if not comms:
            section.append(Paragraph("No communications logged for this voyage.", self.body_style))
            return section
        rows = [
            [
                _fmt_dt(c.communication_time),
                _text(c.channel),
                _text(c.contact_station),
                _text((c.call_type or "").replace("_", " ").title()),
                _text((c.direction or "").title()),
                _text(c.message_summary),
            ]
            for c in comms
        ]
        section.append(
            self._grid_table(
                ["Time", "Channel", "Station", "Type", "Direction", "Summary"],
                rows,
                self._widths(0.17, 0.1, 0.17, 0.13, 0.12, 0.31),
            )
        )
        return section

    def _activity(self) -> list:
        section = [Paragraph("ACTIVITY LOG", self.heading_style)]
        activities = sorted(self.voyage.activity_log or [], key=lambda a: a.get("timestamp") or "")
        if not activities:
            section.append(Paragraph("No activities logged for this voyage.", self.body_style))
            return section
        rows = [
            [_fmt_dt(a.get("timestamp")), _text(a.get("type")), _text(a.get("description")), _text(a.get("location"))]
            for a in activities
        ]
        section.append(
            self._grid_table(["Time", "Type", "Description", "Location"], rows, self._widths(0.18, 0.15, 0.45, 0.22))
        )
        return section

    def _incidents(self) -> list:
        incidents = self.voyage.incidents or []
        if not (self.voyage.has_incidents and incidents):
            return []
        rows = [
            [
                _fmt_dt(i.get("timestamp")),
                _text(i.get("type")),
                _text((i.get("severity") or "").upper()),
                _text(i.get("description")),
                _text(i.get("resolution")),
                _text(i.get("reported_by")),
            ]
            for i in incidents
        ]
        heading = ParagraphStyle("IncidentHeading", parent=self.heading_style, textColor=self.alert_red)
        return [
            Paragraph("INCIDENTS REPORTED", heading),
            self._grid_table(
                ["Time", "Type", "Severity", "Description", "Resolution", "Reported By"],
                rows,
                self._widths(0.15, 0.12, 0.1, 0.27, 0.22, 0.14),
                header_color=self.alert_red,
            ),
        ]

    def _notes(self) -> list:
        if not self.voyage.notes:
            return []
        notes = escape(self.voyage.notes).replace("\n", "<br/>")
        return [Paragraph("NOTES", self.heading_style), Paragraph(notes, self.body_style)]

    def _certification(self) -> list:
        v = self.voyage
        statement = (
            "I hereby certify that this voyage log is a true and accurate record of the voyage "
            f"as required by {escape(VOYAGE_REPORT_AUTHORITY)} regulations."
        )
        rows = [
            ["Master Name", _text(v.master_name)],
            ["Signature", "[Signature on file]" if v.master_signature else "-"],
            ["Confirmed", _fmt_dt(v.confirmed_at) if v.confirmed_at else "Pending"],
            ["Entered By", _text(self.entered_by_name)],
        ]
        return [
            KeepTogether(
                [
                    Paragraph("MASTER'S CERTIFICATION", self.heading_style),
                    Paragraph(f"<i>{statement}</i>", self.body_style),
                    self._key_value_table(rows),
                ]
            )
        ]

    # ------------------------------------------------------------------

    def generate(self) -> bytes:
        """Generate PDF and return bytes"""
        logger.info(f"📄 Generating voyage log PDF for voyage {self.voyage.id}")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=MARGIN,
            leftMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title=f"Voyage Log - {self.voyage.voyage_number}",
        )

        story = [
            Paragraph("VOYAGE LOG REPORT", self.title_style),
            Paragraph(f"{escape(VOYAGE_REPORT_AUTHORITY)} Compliant Documentation", self.subtitle_style),
            Paragraph(f"Generated: {datetime.utcnow().strftime('%Y-%m-%d %H:%M')} UTC", self.subtitle_style),
            Spacer(1, 0.15 * inch),
        ]
        for section in (
            self._identification,
            self._personnel,
            self._cargo,
            self._readings,
            self._weather,
            self._communications,
            self._activity,
            self._incidents,
            self._notes,
            self._certification,
        ):
            story.extend(section())

        canvas_class = type("VoyageCanvas", (NumberedCanvas,), {"voyage_number": self.voyage.voyage_number})
        doc.build(story, canvasmaker=canvas_class)

        pdf_bytes = buffer.getvalue()
        buffer.close()
        logger.info(f"✅ Generated voyage log PDF ({len(pdf_bytes)} bytes)")
        return pdf_bytes
