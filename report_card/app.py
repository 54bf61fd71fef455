import base64
import binascii

import streamlit as st

from report_card.config import settings
from report_card.models import (
    MARK_LIMITS,
    PERIOD_LABELS,
    SUBJECT_LABELS,
    SchoolInfo,
    Student,
    StudentDraft,
    SubjectMarks,
    merge_subjects,
)
from report_card.pdf_export import build_bulk_pdf, build_report_pdf, report_filename
from report_card.report_generator import format_date, generate_report, students_table, subject_table
from report_card.storage import SORT_KEYS, file_repositories

CLASSES = [str(i) for i in range(1, 13)]
SECTIONS = ["A", "B", "C", "D"]
GENDERS = ["", "Male", "Female", "Other"]
SORT_LABELS = {"name": "Name", "class": "Class", "date": "Date Added"}


# ---------- Helper Functions ----------
@st.cache_resource
def get_repositories():
    return file_repositories(settings.data_path)


def encode_upload(uploaded_file):
    if uploaded_file is None:
        return None
    b64 = base64.b64encode(uploaded_file.getvalue()).decode()
    return f"data:{uploaded_file.type};base64,{b64}"


def logo_bytes(data_url):
    if not data_url:
        return None
    try:
        return base64.b64decode(data_url.split(",", 1)[-1], validate=True)
    except (binascii.Error, ValueError):
        return None


def show_pdf(pdf_bytes):
    b64 = base64.b64encode(pdf_bytes).decode()
    pdf_display = f'<iframe src="data:application/pdf;base64,{b64}" width="100%" height="600px"></iframe>'
    st.markdown(pdf_display, unsafe_allow_html=True)


def student_form(student, repo):
    """Add form when student is None, edit form otherwise."""
    is_editing = student is not None
    form_key = f"student_form_{student.id}" if is_editing else "student_form_new"

    with st.form(form_key, clear_on_submit=not is_editing):
        st.subheader(f"Edit {student.name}" if is_editing else "Add New Student")
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Full Name *", value=student.name if is_editing else "")
            father_name = st.text_input("Father's Name *", value=student.father_name if is_editing else "")
            admission_number = st.text_input("Admission Number *", value=student.admission_number if is_editing else "")
            dob = st.text_input("Date of Birth (YYYY-MM-DD)", value=(student.dob or "") if is_editing else "")
        with col2:
            gender = st.selectbox("Gender", GENDERS, index=GENDERS.index(student.gender) if is_editing and student.gender in GENDERS else 0)
            address = st.text_input("Address", value=(student.address or "") if is_editing else "")
            class_name = st.selectbox("Class *", CLASSES, index=CLASSES.index(student.class_name) if is_editing and student.class_name in CLASSES else 0)
            section = st.selectbox("Section *", SECTIONS, index=SECTIONS.index(student.section) if is_editing and student.section in SECTIONS else 0)

        st.markdown("**Academic Information**")
        subjects = {}
        for key, label in SUBJECT_LABELS.items():
            marks = student.subjects.get(key, SubjectMarks()) if is_editing else SubjectMarks()
            cols = st.columns([3, 1, 1, 1, 1])
            cols[0].markdown(label)
            values = {}
            for col, (period, limit) in zip(cols[1:], MARK_LIMITS.items()):
                values[period] = col.number_input(
                    f"{PERIOD_LABELS[period]} (out of {limit})", min_value=0, max_value=limit, step=1,
                    value=min(max(getattr(marks, period), 0), limit), key=f"{form_key}_{key}_{period}",
                )
            subjects[key] = SubjectMarks(**values)

        submitted = st.form_submit_button(f"{'Update' if is_editing else 'Add'} Student")

    if not submitted:
        return
    if not (name.strip() and father_name.strip() and admission_number.strip()):
        st.error("Name, father's name and admission number are required.")
        return

    draft = StudentDraft(
        name=name.strip(), father_name=father_name.strip(), admission_number=admission_number.strip(),
        class_name=class_name, section=section, dob=dob.strip() or None, gender=gender or None,
        address=address.strip() or None,
        subjects=merge_subjects(student.subjects, subjects) if is_editing else subjects,
    )
    if is_editing:
        updated = Student(**draft.model_dump(), id=student.id, date_added=student.date_added)
        if repo.update(updated):
            st.success("Student updated successfully")
        else:
            st.error("Error updating student")
    else:
        new_student = repo.create(draft)
        st.success(f"Student {new_student.name} added successfully")


def report_card_view(report, school):
    cols = st.columns([1, 4, 1])
    if logo_bytes(school.logo1):
        cols[0].image(logo_bytes(school.logo1))
    cols[1].markdown(f"### {school.name}")
    cols[1].markdown(f"*{school.address}*")
    if logo_bytes(school.logo2):
        cols[2].image(logo_bytes(school.logo2))

    st.text(f"Academic Year: {settings.ACADEMIC_YEAR}")
    col1, col2 = st.columns(2)
    with col1:
        st.text(f"Name: {report.name}")
        st.text(f"Father's Name: {report.father_name}")
        st.text(f"Admission No: {report.admission_number}")
    with col2:
        st.text(f"Class: {report.class_name} - {report.section}")
        st.text(f"Roll No: {report.roll_no}")
        st.text(f"Date of Birth: {format_date(report.dob) or 'N/A'}")

    st.dataframe(subject_table(report), hide_index=True)
    st.text(f"Total Marks: {report.total_marks} / {report.total_possible_marks}")
    st.text(f"Percentage: {report.percentage}%")
    st.text(f"Overall Grade: {report.overall_grade}")
    st.text(f"Remarks: {report.remarks}")


# ---------- Streamlit App ----------
st.set_page_config(page_title=settings.APP_TITLE)
st.title("📘 " + settings.APP_TITLE)

student_repo, school_repo = get_repositories()
school = school_repo.get()

if "sort_by" not in st.session_state:
    st.session_state.sort_by = "name"
if "selected_id" not in st.session_state:
    st.session_state.selected_id = None

tab1, tab2, tab3, tab4 = st.tabs(["Students", "Add / Edit Student", "Report Card", "School Settings"])

with tab1:
    st.subheader("Student Report Cards")
    students = student_repo.list()

    col1, col2 = st.columns([3, 1])
    with col1:
        sort_by = st.radio("Sort by", SORT_KEYS, format_func=SORT_LABELS.get, horizontal=True, key="sort_by")
    with col2:
        if st.button("➕ Add Sample Student", key="add_sample_button"):
            sample = student_repo.add_sample()
            st.success(f"Added sample student {sample.name}")
            students = student_repo.list()

    if not students:
        st.info("No students yet. Add a student or a sample student to get started.")
    else:
        sorted_students = student_repo.sort(students, sort_by)
        st.dataframe(students_table(sorted_students), hide_index=True)

        options = {s.id: f"{s.name} ({s.admission_number}, class {s.class_name} - {s.section})" for s in sorted_students}
        selected_id = st.selectbox("Select Student", options=list(options), format_func=options.get, key="student_select")
        st.session_state.selected_id = selected_id

        col1, col2 = st.columns(2)
        with col1:
            selected = student_repo.find_by_id(selected_id)
            if selected is not None:
                report = generate_report(selected)
                st.download_button("📥 Download PDF", data=build_report_pdf(report, school),
                                   file_name=report_filename(report), mime="application/pdf", key="student_pdf_button")
        with col2:
            if st.button("🗑️ Delete Student", key="delete_button"):
                if student_repo.delete(selected_id):
                    st.session_state.selected_id = None
                    st.success("Student deleted")
                    st.rerun()
                else:
                    st.error("Student not found")

        if st.button("📥 Generate All Report Cards", key="bulk_button"):
            reports = [generate_report(s) for s in sorted_students]
            st.download_button("📥 Download All Report Cards", data=build_bulk_pdf(reports, school),
                               file_name="report_cards.pdf", mime="application/pdf", key="bulk_download_button")

with tab2:
    mode = st.radio("Mode", ["Add", "Edit selected student"], horizontal=True, key="form_mode")
    if mode == "Add":
        student_form(None, student_repo)
    else:
        selected = student_repo.find_by_id(st.session_state.selected_id) if st.session_state.selected_id else None
        if selected is None:
            st.info("Select a student on the Students tab first.")
        else:
            student_form(selected, student_repo)

with tab3:
    selected = student_repo.find_by_id(st.session_state.selected_id) if st.session_state.selected_id else None
    if selected is None:
        st.info("Select a student on the Students tab to view the report card.")
    else:
        report = generate_report(selected)
        report_card_view(report, school)

        if st.button("📥 Generate PDF & Preview", key="pdf_preview_button"):
            pdf_bytes = build_report_pdf(report, school)
            show_pdf(pdf_bytes)
            st.download_button("📥 Download PDF", data=pdf_bytes, file_name=report_filename(report),
                               mime="application/pdf", key="report_download_button")

with tab4:
    with st.form("school_form"):
        st.subheader("Edit School Information")
        school_name = st.text_input("School Name", value=school.name)
        school_address = st.text_area("School Address", value=school.address)
        col1, col2 = st.columns(2)
        with col1:
            logo1_file = st.file_uploader("School Logo 1 (Left)", type=["png", "jpg", "jpeg"])
            if logo_bytes(school.logo1):
                st.caption("Current logo 1 is set")
        with col2:
            logo2_file = st.file_uploader("School Logo 2 (Right)", type=["png", "jpg", "jpeg"])
            if logo_bytes(school.logo2):
                st.caption("Current logo 2 is set")
        saved = st.form_submit_button("Save Changes")

    if saved:
        school_repo.save(SchoolInfo(
            name=school_name.strip() or SchoolInfo().name,
            address=school_address.strip(),
            logo1=encode_upload(logo1_file) or school.logo1,
            logo2=encode_upload(logo2_file) or school.logo2,
        ))
        st.success("School information saved")
