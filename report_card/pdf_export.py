# PDF report cards rendered with reportlab

import base64
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Image, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from report_card.config import settings
from report_card.logger import get_logger
from report_card.report_generator import format_date, subject_table

logger = get_logger(__name__)

PRIMARY = colors.HexColor("#0066CC")
HEADER_BG = colors.HexColor("#ADD8E6")
TITLE_COLOR = colors.HexColor("#003366")
LOGO_SIZE = 2.5 * cm


# ---------- Helper Functions ----------
def decode_logo(data_url):
    """Decode a base64 (data URL) logo into a reportlab Image, or None."""
    if not data_url:
        return None
    try:
        encoded = data_url.split(",", 1)[1] if data_url.startswith("data:") else data_url
        raw = base64.b64decode(encoded, validate=True)
        ImageReader(BytesIO(raw)).getSize()
    except Exception as e:  # PIL raises assorted error types for undecodable images
        logger.warning(f"Skipping unreadable school logo: {e}")
        return None
    return Image(BytesIO(raw), width=LOGO_SIZE, height=LOGO_SIZE)


def report_filename(report):
    return f"{report.name}_report_card.pdf"


def _styles():
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(name="title", parent=styles["Title"], fontName="Times-Bold",
                                fontSize=24, leading=28, textColor=TITLE_COLOR, alignment=1),
        "year": ParagraphStyle(name="year", fontName="Times-Bold", fontSize=14, leading=18,
                               textColor=TITLE_COLOR, alignment=1),
        "school": ParagraphStyle(name="school", fontName="Times-Bold", fontSize=13, leading=16,
                                 textColor=PRIMARY, alignment=1),
        "address": ParagraphStyle(name="address", fontSize=10, leading=12, alignment=1),
        "normal": ParagraphStyle(name="normal", parent=styles["Normal"], fontSize=11, leading=14),
    }


def _header(school, academic_year, styles):
    heading = [
        Paragraph("STUDENT REPORT CARD", styles["title"]),
        Paragraph(f"Academic Year: {academic_year}", styles["year"]),
        Paragraph(escape(school.name), styles["school"]),
        Paragraph(escape(school.address or "School Address"), styles["address"]),
    ]
    left = decode_logo(school.logo1) or ""
    right = decode_logo(school.logo2) or ""

    table = Table([[left, heading, right]], colWidths=[3 * cm, 12 * cm, 3 * cm])
    table.setStyle(TableStyle([
        ("BACKGROUND", (1, 0), (1, 0), HEADER_BG),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("LINEBELOW", (0, 0), (-1, 0), 0.5, PRIMARY),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
    ]))
    return table


def _student_info(report):
    rows = [
        ["Name:", report.name, "Class:", f"{report.class_name} - {report.section}"],
        ["Father's Name:", report.father_name, "Roll No:", report.roll_no],
        ["Admission No:", report.admission_number, "Date of Birth:", format_date(report.dob) or "N/A"],
    ]
    table = Table(rows, colWidths=[3.5 * cm, 5.5 * cm, 3.5 * cm, 5.5 * cm])
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTNAME", (2, 0), (2, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 11),
        ("LINEBELOW", (0, -1), (-1, -1), 0.5, colors.grey),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    return table


def _marks_table(report):
    df = subject_table(report)
    table_data = [list(df.columns)]
    for row in df.itertuples(index=False):
        table_data.append([str(value) for value in row])
    table_data.append([f"Percentage: {report.percentage}%"] + [""] * (len(df.columns) - 1))

    col_widths = [5 * cm] + [2 * cm] * 5 + [2 * cm]
    table = Table(table_data, colWidths=col_widths, repeatRows=1)

    last = len(table_data) - 1
    style = TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), PRIMARY),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, 1), (0, -1), "Helvetica-Bold"),
        ("FONTNAME", (5, 1), (6, -1), "Helvetica-Bold"),
        ("FONTNAME", (0, last - 1), (-1, last), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, last - 1), 0.1, colors.HexColor("#646464")),
        ("SPAN", (0, last), (-1, last)),
        ("ALIGN", (1, 0), (-1, -1), "CENTER"),
        ("ALIGN", (0, last), (-1, last), "RIGHT"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ])
    for row_idx in range(2, last - 1, 2):
        style.add("BACKGROUND", (0, row_idx), (-1, row_idx), colors.HexColor("#F0F0F0"))

    # Red grade for failing subjects
    for row_idx, grade in enumerate(df["Grade"].iloc[:-1], start=1):
        if grade == "F":
            style.add("TEXTCOLOR", (6, row_idx), (6, row_idx), colors.red)

    table.setStyle(style)
    return table


def _signatures():
    table = Table([["Class Teacher", "Principal"]], colWidths=[9 * cm, 9 * cm])
    table.setStyle(TableStyle([
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("TOPPADDING", (0, 0), (-1, -1), 30),
    ]))
    return table


def report_elements(report, school, academic_year):
    styles = _styles()
    return [
        _header(school, academic_year, styles),
        Spacer(1, 12),
        _student_info(report),
        Spacer(1, 12),
        _marks_table(report),
        Spacer(1, 12),
        Paragraph(f"<b>Remarks:</b> {escape(report.remarks)}", styles["normal"]),
        Spacer(1, 20),
        _signatures(),
    ]


def _build(elements, title):
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=title,
                            rightMargin=1.5 * cm, leftMargin=1.5 * cm,
                            topMargin=1.5 * cm, bottomMargin=1.5 * cm)
    doc.build(elements)
    return buffer.getvalue()


def build_report_pdf(report, school, academic_year=None):
    academic_year = academic_year or settings.ACADEMIC_YEAR
    return _build(report_elements(report, school, academic_year), title=f"{report.name} Report Card")


def build_bulk_pdf(reports, school, academic_year=None):
    """All report cards in one document, one page each."""
    academic_year = academic_year or settings.ACADEMIC_YEAR
    elements = []
    for index, report in enumerate(reports):
        if index:
            elements.append(PageBreak())
        elements.extend(report_elements(report, school, academic_year))
    if not elements:
        raise ValueError("No report cards to export")
    return _build(elements, title="Report Cards")
