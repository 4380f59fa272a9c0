"""
Report card PDF rendering with reportlab platypus.

Rendering is synchronous and CPU bound; the report card service calls it
through ``asyncio.to_thread``.
"""

from __future__ import annotations

import io
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from SISFO.db.models import ReportCard, ReportCardDetail

BRAND_PRIMARY = colors.HexColor("#1f3b57")
BRAND_GRAY = colors.HexColor("#444444")


def _styles() -> Dict[str, ParagraphStyle]:
    return {
        "title": ParagraphStyle(
            "CardTitle",
            fontSize=15,
            fontName="Helvetica-Bold",
            textColor=BRAND_PRIMARY,
            spaceAfter=8,
            leading=17,
        ),
        "section_header": ParagraphStyle(
            "CardSection",
            fontSize=11,
            fontName="Helvetica-Bold",
            textColor=BRAND_PRIMARY,
            spaceAfter=6,
            leading=13,
        ),
        "data_label": ParagraphStyle("CardLabel", fontSize=9, fontName="Helvetica-Bold", textColor=BRAND_GRAY),
        "data_value": ParagraphStyle("CardValue", fontSize=9, fontName="Helvetica"),
        "small": ParagraphStyle("CardSmall", fontSize=7, fontName="Helvetica", textColor=BRAND_GRAY, leading=9),
    }


def _info_table(rows: Sequence[tuple[str, str]], styles: Dict[str, ParagraphStyle]) -> Table:
    data = [
        [Paragraph(escape(label), styles["data_label"]), Paragraph(escape(value), styles["data_value"])]
        for label, value in rows
    ]
    table = Table(data, colWidths=[1.8 * inch, 4.9 * inch])
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ]
        )
    )
    return table


def _subject_table(details: Sequence[ReportCardDetail]) -> Table:
    data: List[List[Any]] = [["No", "Subject", "Credit", "Final score", "Grade"]]
    for i, d in enumerate(details, start=1):
        data.append([str(i), d.subject_name, str(d.credit), f"{d.final_score:.2f}", d.grade_letter])
    if len(data) == 1:
        data.append(["-", "No graded subjects", "-", "-", "-"])

    table = Table(data, colWidths=[0.5 * inch, 3.4 * inch, 0.8 * inch, 1.1 * inch, 0.8 * inch], repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), BRAND_PRIMARY),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (2, 0), (-1, -1), "CENTER"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#999999")),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f2f2f2")]),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    return table


def render_report_card_pdf(
    card: ReportCard,
    details: Sequence[ReportCardDetail],
    student_name: Optional[str] = None,
) -> bytes:
    """Render ``card`` and its subject lines; the result always starts with ``%PDF``."""
    styles = _styles()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        title=f"Report Card - {student_name or card.student_id}",
        author="SISFO",
    )

    generated = card.generated_at or datetime.now()
    elements: List[Any] = [
        Paragraph("STUDENT REPORT CARD", styles["title"]),
        HRFlowable(width="100%", thickness=2, color=BRAND_PRIMARY, spaceBefore=4, spaceAfter=12),
        _info_table(
            [
                ("Student", student_name or str(card.student_id)),
                ("Student ID", str(card.student_id)),
                ("Class ID", str(card.class_id)),
                ("Semester ID", str(card.semester_id)),
                ("Status", str(card.status)),
            ],
            styles,
        ),
        Spacer(1, 0.25 * inch),
        Paragraph("Subjects", styles["section_header"]),
        _subject_table(details),
        Spacer(1, 0.25 * inch),
        _info_table(
            [
                ("GPA", f"{card.gpa:.2f}"),
                ("Total credits", str(card.total_credits)),
            ],
            styles,
        ),
    ]
    if card.comments:
        elements += [Spacer(1, 0.2 * inch), Paragraph("Comments", styles["section_header"]),
                     Paragraph(escape(card.comments), styles["data_value"])]
    elements += [
        Spacer(1, 0.4 * inch),
        Paragraph(f"Generated {generated:%Y-%m-%d %H:%M} UTC. Report card {card.id}.", styles["small"]),
    ]

    doc.build(elements)
    return buffer.getvalue()


__all__ = ["render_report_card_pdf"]
