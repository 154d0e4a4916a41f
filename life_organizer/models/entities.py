# life_organizer/models/entities.py
from sqlalchemy import Boolean, Column, Integer, String, Date, DateTime, Text, ForeignKey, func
from .db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    full_name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="newcomer")
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class AuthSession(Base):
    __tablename__ = "auth_sessions"
    token = Column(String(128), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    issued_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False)


class Task(Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    is_starter = Column(Boolean, nullable=False, default=False, server_default="0")
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class Deadline(Base):
    __tablename__ = "deadlines"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(200), nullable=False)
    category = Column(String(30), nullable=False, default="other")
    due_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    priority = Column(String(10), nullable=False, default="medium")
    status = Column(String(20), nullable=False, default="upcoming")


class Announcement(Base):
    __tablename__ = "announcements"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    category = Column(String(30), nullable=False, default="general")
    created_by = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True)


# ---------- Recurring templates ----------

class WorkTemplate(Base):
    __tablename__ = "work_templates"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    workplace = Column(String(120), nullable=True)
    role = Column(String(120), nullable=True)
    weekday = Column(Integer, nullable=False)  # 1=Mon..7=Sun
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)


class StudyTemplate(Base):
    __tablename__ = "study_templates"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    subject = Column(String(120), nullable=False)
    weekday = Column(Integer, nullable=False)  # 1=Mon..7=Sun
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)


# ---------- Concrete entries ----------

class WorkShift(Base):
    __tablename__ = "work_schedules"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    shift_date = Column(Date, index=True, nullable=False)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    workplace = Column(String(120), nullable=True)
    role = Column(String(120), nullable=True)
    notes = Column(Text, nullable=True)


class StudySession(Base):
    __tablename__ = "study_schedules"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    study_date = Column(Date, index=True, nullable=False)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    subject = Column(String(120), nullable=False)
    notes = Column(Text, nullable=True)
