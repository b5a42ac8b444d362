"""
Spreadsheet exports of marks, built with openpyxl.

Only the data is fixed: which rows and columns appear, in which order. Styling
is limited to a bold, shaded header row.
"""
import io
import re
from typing import Iterable, List

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from school_records.grading.engine import compute_percentage
from school_records.models import Marks, Student

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

MARKS_COLUMNS = [
    ("Subject", 15),
    ("Exam Type", 15),
    ("Marks Obtained", 15),
    ("Total Marks", 15),
    ("Percentage", 15),
    ("Grade", 10),
    ("Exam Date", 15),
    ("Academic Year", 15),
    ("Semester", 10),
    ("Remarks", 20),
]

STUDENT_COLUMNS = [
    ("Student Name", 20),
    ("Roll Number", 15),
    ("Class", 10),
    ("Section", 10),
]

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFE0E0E0")


def format_percentage(marks: Marks) -> str:
    percentage = marks.percentage
    if percentage is None:
        percentage = compute_percentage(marks.marks_obtained, marks.total_marks)
    return f"{percentage:.2f}%"


def _marks_cells(marks: Marks) -> List:
    return [
        marks.subject,
        marks.exam_type,
        marks.marks_obtained,
        marks.total_marks,
        format_percentage(marks),
        marks.grade,
        marks.exam_date.date().isoformat() if marks.exam_date else "N/A",
        marks.academic_year,
        marks.semester,
        marks.remarks or "",
    ]


def _write_header(worksheet, columns, row_index: int) -> None:
    for column_index, (title, width) in enumerate(columns, start=1):
        cell = worksheet.cell(row=row_index, column=column_index, value=title)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        worksheet.column_dimensions[get_column_letter(column_index)].width = width


def _to_bytes(workbook: Workbook) -> bytes:
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def student_marks_filename(student: Student) -> str:
    safe_name = re.sub(r"\s+", "_", student.name.strip())
    return f"{safe_name}_marks.xlsx"


def build_student_marks_workbook(student: Student, marks: Iterable[Marks]) -> bytes:
    """One student's marks, preceded by a short student information block."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Student Marks"

    worksheet.append(["Student Information"])
    worksheet.append(["Name:", student.name])
    worksheet.append(["Roll Number:", student.roll_number])
    worksheet.append(["Class:", student.class_name])
    worksheet.append(["Section:", student.section])
    worksheet.append([])

    _write_header(worksheet, MARKS_COLUMNS, row_index=7)
    for record in marks:
        worksheet.append(_marks_cells(record))

    return _to_bytes(workbook)


def build_all_marks_workbook(marks: Iterable[Marks]) -> bytes:
    """Every marks record with its student's identity columns, one row each."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "All Students Marks"

    _write_header(worksheet, STUDENT_COLUMNS + MARKS_COLUMNS, row_index=1)
    for record in marks:
        student = record.student
        if student is not None:
            identity = [student.name, student.roll_number, student.class_name, student.section]
        else:
            identity = ["Unknown Student", "N/A", "N/A", "N/A"]
        worksheet.append(identity + _marks_cells(record))

    return _to_bytes(workbook)
