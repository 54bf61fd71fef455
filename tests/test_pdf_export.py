import base64
import re
from io import BytesIO

import pytest
from PIL import Image

from report_card.models import SchoolInfo
from report_card.pdf_export import build_bulk_pdf, build_report_pdf, decode_logo, report_filename
from report_card.report_generator import generate_report
from tests.factories import make_student


def png_data_url():
    buffer = BytesIO()
    Image.new("RGB", (8, 8), (0, 102, 204)).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


PNG_DATA_URL = png_data_url()


@pytest.fixture
def report():
    return generate_report(make_student(name="Amit Kumar", dob="2012-03-07"))


def page_count(pdf_bytes):
    return max(int(n) for n in re.findall(rb"/Count (\d+)", pdf_bytes))


def test_build_report_pdf(report):
    pdf = build_report_pdf(report, SchoolInfo(), academic_year="2025-2026")

    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_build_report_pdf_with_logos(report):
    school = SchoolInfo(name="St. Mary's & Co. School", logo1=PNG_DATA_URL, logo2=PNG_DATA_URL)

    assert build_report_pdf(report, school).startswith(b"%PDF")


def test_malformed_logo_is_skipped(report):
    school = SchoolInfo(logo1="data:image/png;base64,not-an-image", logo2="garbage!!")

    assert decode_logo(school.logo1) is None
    assert decode_logo(school.logo2) is None
    assert build_report_pdf(report, school).startswith(b"%PDF")


def test_decode_logo():
    assert decode_logo(None) is None
    assert decode_logo(PNG_DATA_URL) is not None


def test_bulk_pdf_has_a_page_per_report():
    reports = [generate_report(make_student(student_id=str(i), name=f"Student {i}")) for i in range(3)]

    single = build_report_pdf(reports[0], SchoolInfo())
    bulk = build_bulk_pdf(reports, SchoolInfo())

    assert bulk.startswith(b"%PDF")
    assert page_count(single) == 1
    assert page_count(bulk) == 3


def test_bulk_pdf_requires_reports():
    with pytest.raises(ValueError):
        build_bulk_pdf([], SchoolInfo())


def test_report_filename(report):
    assert report_filename(report) == "Amit Kumar_report_card.pdf"
