#!/usr/bin/env python3
"""
Seed the database with demo accounts, students and marks.

This script will:
1. Create the tables if they don't exist
2. Create an admin and two teachers (password: password123)
3. Create sample students across two classes
4. Record sample marks, with percentage and grade derived by the grade engine

Records that already exist (same email / roll number) are left untouched, so the
script can be run repeatedly. Pass --reset to drop and recreate all tables first.

Usage:
    python -m school_records.scripts.seed_data [--reset]
"""

import argparse
from datetime import date, datetime

from sqlalchemy.orm import Session

from school_records.auth.service import hash_password
from school_records.config.settings import settings
from school_records.database import Base, create_db_engine, create_session_factory, init_db
from school_records.grading.engine import recompute
from school_records.models import Marks, Student, Teacher

DEFAULT_PASSWORD = "password123"

TEACHERS = [
    {"name": "Admin User", "email": "admin@school.com", "subject": "Administration", "phone": "+1234567890", "role": "admin"},
    {"name": "John Smith", "email": "teacher@school.com", "subject": "Mathematics", "phone": "+1234567891", "role": "teacher"},
    {"name": "Priya Nair", "email": "priya.nair@school.com", "subject": "Science", "phone": "+1234567897", "role": "teacher"},
]

STUDENTS = [
    {"name": "Alice Johnson", "roll_number": "2024001", "class_name": "10th", "section": "A",
     "email": "alice.johnson@student.com", "phone": "+1234567892", "address": "123 Main St, City, State",
     "date_of_birth": date(2006, 5, 15), "gender": "Female"},
    {"name": "Bob Wilson", "roll_number": "2024002", "class_name": "10th", "section": "A",
     "email": "bob.wilson@student.com", "phone": "+1234567893", "address": "456 Oak Ave, City, State",
     "date_of_birth": date(2006, 8, 22), "gender": "Male"},
    {"name": "Carol Davis", "roll_number": "2024003", "class_name": "10th", "section": "B",
     "email": "carol.davis@student.com", "phone": "+1234567894", "address": "789 Pine Rd, City, State",
     "date_of_birth": date(2006, 3, 10), "gender": "Female"},
    {"name": "David Brown", "roll_number": "2024004", "class_name": "10th", "section": "B",
     "email": "david.brown@student.com", "phone": "+1234567895", "address": "321 Elm St, City, State",
     "date_of_birth": date(2006, 11, 5), "gender": "Male"},
    {"name": "Eva Garcia", "roll_number": "2024005", "class_name": "11th", "section": "A",
     "email": "eva.garcia@student.com", "phone": "+1234567896", "address": "654 Maple Dr, City, State",
     "date_of_birth": date(2005, 7, 18), "gender": "Female"},
]

# (roll number, subject, exam type, marks obtained, total marks, entered by email)
MARKS = [
    ("2024001", "Mathematics", "Midterm", 92, 100, "teacher@school.com"),
    ("2024002", "Mathematics", "Midterm", 67, 100, "teacher@school.com"),
    ("2024003", "Mathematics", "Midterm", 38, 100, "teacher@school.com"),
    ("2024001", "Science", "Quiz", 18, 20, "priya.nair@school.com"),
    ("2024004", "Science", "Quiz", 11, 20, "priya.nair@school.com"),
    ("2024005", "Mathematics", "Final", 81, 100, "teacher@school.com"),
]


def seed_teachers(db: Session) -> dict:
    teachers = {}
    for data in TEACHERS:
        teacher = db.query(Teacher).filter(Teacher.email == data["email"]).first()
        if teacher is None:
            teacher = Teacher(password_hash=hash_password(DEFAULT_PASSWORD), **data)
            db.add(teacher)
            print(f"Created {data['role']}: {data['email']}")
        else:
            print(f"Skipping existing account: {data['email']}")
        teachers[data["email"]] = teacher
    db.commit()
    return teachers


def seed_students(db: Session) -> dict:
    students = {}
    for data in STUDENTS:
        student = db.query(Student).filter(Student.roll_number == data["roll_number"]).first()
        if student is None:
            student = Student(admission_date=date.today(), **data)
            db.add(student)
            print(f"Created student: {data['name']} ({data['roll_number']})")
        else:
            print(f"Skipping existing student: {data['roll_number']}")
        students[data["roll_number"]] = student
    db.commit()
    return students


def seed_marks(db: Session, teachers: dict, students: dict) -> int:
    academic_year = str(datetime.now().year)
    created = 0
    for roll_number, subject, exam_type, obtained, total, entered_by in MARKS:
        student = students[roll_number]
        exists = db.query(Marks.id).filter(
            Marks.student_id == student.id,
            Marks.subject == subject,
            Marks.exam_type == exam_type,
            Marks.academic_year == academic_year,
        ).first()
        if exists is not None:
            continue

        marks = Marks(
            student_id=student.id,
            subject=subject,
            exam_type=exam_type,
            marks_obtained=obtained,
            total_marks=total,
            academic_year=academic_year,
            entered_by_id=teachers[entered_by].id,
        )
        recompute(marks)
        db.add(marks)
        created += 1
    db.commit()
    return created


def main():
    parser = argparse.ArgumentParser(description="Seed the school records database")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    args = parser.parse_args()

    print("--- Starting database seeding ---")
    engine = create_db_engine(settings.DATABASE_URL)
    if args.reset:
        print("Dropping all tables...")
        Base.metadata.drop_all(bind=engine)
    init_db(engine)

    session_factory = create_session_factory(engine)
    db = session_factory()
    try:
        teachers = seed_teachers(db)
        students = seed_students(db)
        created = seed_marks(db, teachers, students)
        print(f"Created {created} marks records")
    finally:
        db.close()

    print("--- Database seeding complete ---")
    print(f"Admin login: admin@school.com / {DEFAULT_PASSWORD}")
    print(f"Teacher login: teacher@school.com / {DEFAULT_PASSWORD}")


if __name__ == "__main__":
    main()
