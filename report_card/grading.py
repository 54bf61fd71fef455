# Grade and remark classification for report cards

from report_card.models import SUBJECT_MAX_MARKS, SubjectResult

# (lower bound, grade, remark), highest band first
GRADE_BANDS = (
    (90, "A+", "Outstanding performance! Keep up the excellent work."),
    (80, "A", "Excellent work throughout the year!"),
    (70, "B+", "Very good performance. Continue the hard work."),
    (60, "B", "Good performance with room for improvement."),
    (50, "C", "Satisfactory performance. Need to focus more on studies."),
    (40, "D", "Fair performance. Significant improvement needed."),
)
FAIL_GRADE = "F"
FAIL_REMARK = "Needs considerable improvement in all subjects."


def get_grade_remark(percentage):
    for lower, grade, remark in GRADE_BANDS:
        if percentage >= lower:
            return grade, remark
    return FAIL_GRADE, FAIL_REMARK


def classify_grade(percentage):
    return get_grade_remark(percentage)[0]


def remarks_for(percentage):
    return get_grade_remark(percentage)[1]


def get_subject_total(marks):
    return marks.session1 + marks.half_yearly + marks.session2 + marks.final


def evaluate_subject(marks):
    """Total a subject's four period marks and grade the result.

    Out-of-range marks are graded as given; bounding them is the job of
    whatever collected the input.
    """
    total = get_subject_total(marks)
    percentage = total * 100 / SUBJECT_MAX_MARKS
    return SubjectResult(
        session1=marks.session1,
        half_yearly=marks.half_yearly,
        session2=marks.session2,
        final=marks.final,
        total=total,
        grade=classify_grade(percentage),
    )
