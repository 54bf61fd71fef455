# Report card generation: per-subject results, totals, percentage and remarks

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

from report_card.exceptions import InvalidStudentError
from report_card.grading import classify_grade, evaluate_subject, remarks_for
from report_card.models import (
    PERIOD_LABELS,
    SUBJECT_KEYS,
    SUBJECT_LABELS,
    SUBJECT_MAX_MARKS,
    ExamTotals,
    ReportCardData,
)

TABLE_COLUMNS = ["Subject", *PERIOD_LABELS.values(), "Total", "Grade"]


def round1(value):
    """Round half away from zero to one decimal place."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def calculate_exam_totals(subject_results):
    totals = {period: 0 for period in PERIOD_LABELS}
    for result in subject_results.values():
        for period in totals:
            totals[period] += getattr(result, period)
    return ExamTotals(**totals)


def generate_report(student):
    """Build the report card for a student.

    Only the known subjects are graded, in canonical order. Raises
    InvalidStudentError when the student has none of them.
    """
    subject_results = {
        key: evaluate_subject(student.subjects[key])
        for key in SUBJECT_KEYS
        if key in student.subjects
    }
    if not subject_results:
        raise InvalidStudentError(getattr(student, "id", None))

    total_marks = sum(result.total for result in subject_results.values())
    total_possible_marks = len(subject_results) * SUBJECT_MAX_MARKS
    percentage = round1(Decimal(total_marks) * 100 / Decimal(total_possible_marks))

    return ReportCardData(
        id=student.id,
        name=student.name,
        father_name=student.father_name,
        admission_number=student.admission_number,
        class_name=student.class_name,
        section=student.section,
        dob=student.dob,
        gender=student.gender,
        address=student.address,
        date_added=student.date_added,
        subjects=subject_results,
        total_marks=total_marks,
        total_possible_marks=total_possible_marks,
        percentage=percentage,
        overall_grade=classify_grade(percentage),
        remarks=remarks_for(percentage),
        exam_totals=calculate_exam_totals(subject_results),
    )


def subject_table(report):
    """Marks table for display: one row per subject plus an OVERALL row."""
    records = []
    for key, result in report.subjects.items():
        records.append([
            SUBJECT_LABELS[key],
            result.session1, result.half_yearly, result.session2, result.final,
            result.total, result.grade,
        ])

    totals = report.exam_totals
    records.append([
        "OVERALL",
        totals.session1, totals.half_yearly, totals.session2, totals.final,
        report.total_marks, report.overall_grade,
    ])
    return pd.DataFrame(records, columns=TABLE_COLUMNS)


def students_table(students):
    """Summary table for the student list screen."""
    records = [
        [s.name, s.father_name, s.admission_number, f"{s.class_name} - {s.section}", format_date(s.date_added)]
        for s in students
    ]
    return pd.DataFrame(records, columns=["Name", "Father's Name", "Admission No", "Class", "Date Added"])


def format_date(value):
    """Format a date as DD-MM-YYYY; empty string if missing or unparseable."""
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return ""
    if not isinstance(value, date):
        return ""
    return value.strftime("%d-%m-%Y")
