from datetime import datetime, date, timezone
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Float, ForeignKey, Text, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from school_records.database import Base
from school_records.grading.engine import is_passing

ROLES = ("teacher", "admin")


def current_academic_year() -> str:
    return str(datetime.now().year)


# SQLAlchemy Models
class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    # Unique across active and inactive rows; soft-deleted students keep their roll number
    roll_number = Column(String(50), unique=True, index=True, nullable=False)
    class_name = Column(String(50), nullable=False, index=True)
    section = Column(String(20), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(10), nullable=False)
    admission_date = Column(Date, nullable=False, default=date.today)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    marks = relationship("Marks", back_populates="student", order_by="Marks.exam_date.desc()")

    def __repr__(self):
        return f"<Student(id={self.id}, roll_number='{self.roll_number}', active={self.is_active})>"


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    subject = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    role = Column(String(20), nullable=False, default="teacher")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    marks_entered = relationship("Marks", back_populates="entered_by")

    def __repr__(self):
        return f"<Teacher(id={self.id}, email='{self.email}', role='{self.role}')>"


class Marks(Base):
    __tablename__ = "marks"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    subject = Column(String(100), nullable=False)
    exam_type = Column(String(20), nullable=False, default="Midterm")
    marks_obtained = Column(Float, nullable=False)
    total_marks = Column(Float, nullable=False, default=100)
    # Derived by grading.recompute before every write, never taken from callers
    percentage = Column(Float, nullable=True)
    grade = Column(String(2), nullable=False, default="F")
    exam_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    academic_year = Column(String(20), nullable=False, default=current_academic_year)
    semester = Column(String(4), nullable=False, default="1st")
    remarks = Column(Text, nullable=True)
    entered_by_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    student = relationship("Student", back_populates="marks")
    entered_by = relationship("Teacher", back_populates="marks_entered")

    @property
    def passed(self) -> bool:
        return self.percentage is not None and is_passing(self.percentage)

    __table_args__ = (
        Index("ix_marks_student_subject_exam_year", "student_id", "subject", "exam_type", "academic_year"),
    )

    def __repr__(self):
        return (
            f"<Marks(id={self.id}, student_id={self.student_id}, subject='{self.subject}', "
            f"exam_type='{self.exam_type}', grade='{self.grade}', entered_by_id={self.entered_by_id})>"
        )
