from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from xml.sax.saxutils import escape
from io import BytesIO
from datetime import date
from typing import Dict, List

from . import markup
from ..services import codec

SECTIONS = [
    ("agenda", "Agenda"),
    ("notes", "Discussion Notes"),
    ("action_items", "Action Items"),
    ("decisions", "Decisions Made"),
]

BRAND_BLUE = colors.HexColor("#0052cc")
MUTED = colors.HexColor("#6b778c")


class MinutesPDFGenerator:
    """Minuta de reunión imprimible: encabezado, secciones y pie."""

    def __init__(self, employee_names: Dict[str, str], project_names: Dict[str, str]):
        self.employee_names = employee_names
        self.project_names = project_names
        self.styles = getSampleStyleSheet()
        self.elements = []

        # Estilos personalizados
        self.style_title = ParagraphStyle('MinutesTitle', parent=self.styles['Heading1'], fontSize=18, textColor=BRAND_BLUE)
        self.style_meta = ParagraphStyle('Meta', parent=self.styles['Normal'], fontSize=9, textColor=MUTED)
        self.style_section = ParagraphStyle('Section', parent=self.styles['Heading2'], fontSize=11, textColor=BRAND_BLUE, spaceBefore=10)
        self.style_subheading = ParagraphStyle('SubHeading', parent=self.styles['Heading3'], fontSize=10)
        self.style_body = ParagraphStyle('Body', parent=self.styles['Normal'], fontSize=10, leading=14)
        self.style_bullet = ParagraphStyle('Bullet', parent=self.style_body, leftIndent=12)
        self.style_cell = ParagraphStyle('Cell', parent=self.styles['Normal'], fontSize=9)
        self.style_footer = ParagraphStyle('Footer', parent=self.styles['Normal'], fontSize=8, alignment=1, textColor=MUTED)

    def attendee_names(self, attendee_ids: str) -> str:
        names = [self.employee_names[i] for i in codec.decode(attendee_ids) if i in self.employee_names]
        return ", ".join(names) if names else "None"

    def project_name(self, project_id: str) -> str:
        return self.project_names.get(project_id or "", "—")

    def _add_header(self, meeting):
        self.elements.append(Paragraph(escape(meeting.title), self.style_title))
        self.elements.append(Paragraph(
            f"<b>Date:</b> {meeting.date.isoformat()} &nbsp;&nbsp; "
            f"<b>Project:</b> {escape(self.project_name(meeting.project_id))}",
            self.style_meta
        ))
        self.elements.append(Paragraph(
            f"<b>Attendees:</b> {escape(self.attendee_names(meeting.attendee_ids))}",
            self.style_meta
        ))
        self.elements.append(Spacer(1, 0.2 * inch))

    def _render_blocks(self, blocks: List[markup.Block]):
        for block in blocks:
            if block.kind == "heading":
                self.elements.append(Paragraph(escape(block.text), self.style_subheading))
            elif block.kind == "item":
                self.elements.append(Paragraph(f"• {escape(block.text)}", self.style_bullet))
            elif block.kind == "todo":
                box = "[x]" if block.checked else "[ ]"
                self.elements.append(Paragraph(f"{box} {escape(block.text)}", self.style_bullet))
            elif block.kind == "table":
                data = [[Paragraph(escape(c), self.style_cell) for c in row] for row in block.rows]
                t = Table(data, hAlign='LEFT')
                t.setStyle(TableStyle([
                    ('GRID', (0,0), (-1,-1), 0.5, colors.lightgrey),
                    ('BACKGROUND', (0,0), (-1,0), colors.whitesmoke),
                    ('VALIGN', (0,0), (-1,-1), 'TOP'),
                ]))
                self.elements.append(t)
                self.elements.append(Spacer(1, 0.1 * inch))
            else:
                self.elements.append(Paragraph(escape(block.text), self.style_body))

    def _add_footer(self, today: date):
        self.elements.append(Spacer(1, 0.4 * inch))
        self.elements.append(Paragraph(f"Generado desde ScrumCMD • {today.isoformat()}", self.style_footer))

    def generate(self, meeting, today: date) -> BytesIO:
        """Genera el PDF de una minuta. Las secciones vacías se omiten."""
        buffer = BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=LETTER, title=meeting.title)
        self.elements = []

        self._add_header(meeting)
        for field, label in SECTIONS:
            content = getattr(meeting, field) or ""
            if not content.strip():
                continue
            self.elements.append(Paragraph(label.upper(), self.style_section))
            self._render_blocks(markup.parse(content))

        self._add_footer(today)

        doc.build(self.elements)
        buffer.seek(0)
        return buffer
