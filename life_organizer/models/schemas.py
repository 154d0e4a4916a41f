from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional

# ---------- Auth / users ----------

class RegisterIn(BaseModel):
    full_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    role: Optional[str] = None

class LoginIn(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class UserOut(BaseModel):
    id: int
    full_name: str
    email: str
    role: str

class UserBrief(BaseModel):
    id: int
    email: str
    role: str

class AuthOut(BaseModel):
    message: str
    token: str
    user: UserBrief

class ProfileUpdateIn(BaseModel):
    full_name: str = ""

class ChangePasswordIn(BaseModel):
    currentPassword: str = ""
    newPassword: str = ""

class RoleIn(BaseModel):
    role: str

class ResetPasswordIn(BaseModel):
    newPassword: str = ""

class AdminStatsOut(BaseModel):
    totalUsers: int
    totalTasks: int
    completedTasks: int
    totalAnnouncements: int
    totalDeadlines: int

# ---------- Tasks ----------

class TaskIn(BaseModel):
    title: str = ""
    description: Optional[str] = None
    due_date: Optional[date] = None

class TaskUpdateIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[str] = None

class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: str
    is_starter: bool
    created_at: Optional[datetime] = None

class TaskPage(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    tasks: List[TaskOut]

class TaskSummary(BaseModel):
    total: int
    completed: int
    pending: int
    percent: int

# ---------- Deadlines ----------

class DeadlineIn(BaseModel):
    title: str = ""
    category: Optional[str] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    priority: Optional[str] = None

class DeadlineUpdateIn(BaseModel):
    title: Optional[str] = None
    category: Optional[str] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None

class DeadlineOut(BaseModel):
    id: int
    title: str
    category: str
    due_date: date
    notes: Optional[str] = None
    priority: str
    status: str

# ---------- Announcements ----------

class AnnouncementIn(BaseModel):
    title: str = ""
    message: str = ""
    category: Optional[str] = None

class AnnouncementUpdateIn(BaseModel):
    title: Optional[str] = None
    message: Optional[str] = None
    category: Optional[str] = None

class AnnouncementOut(BaseModel):
    id: int
    title: str
    message: str
    category: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by_name: Optional[str] = None

# ---------- Templates ----------

class WorkTemplateIn(BaseModel):
    workplace: Optional[str] = None
    role: Optional[str] = None
    weekday: int
    start_time: str = Field(..., min_length=1)
    end_time: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    notes: Optional[str] = None

class WorkTemplateOut(WorkTemplateIn):
    id: int

class StudyTemplateIn(BaseModel):
    subject: str = Field(..., min_length=1)
    weekday: int
    start_time: str = Field(..., min_length=1)
    end_time: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    notes: Optional[str] = None

class StudyTemplateOut(StudyTemplateIn):
    id: int

class OccurrenceOut(BaseModel):
    type: str = "template"
    template_id: Optional[int] = None
    date: date
    workplace: Optional[str] = None
    role: Optional[str] = None
    subject: Optional[str] = None
    start_time: str
    end_time: str
    notes: Optional[str] = None
    weekNumber: int

class GenerateOut(BaseModel):
    month: Optional[str] = None
    weekStart: Optional[date] = None
    events: List[OccurrenceOut]

# ---------- Concrete entries ----------

class WorkShiftIn(BaseModel):
    shift_date: date
    start_time: str = Field(..., min_length=1)
    end_time: str = Field(..., min_length=1)
    workplace: Optional[str] = None
    role: Optional[str] = None
    notes: Optional[str] = None

class WorkShiftOut(WorkShiftIn):
    id: int

class StudySessionIn(BaseModel):
    study_date: date
    start_time: str = Field(..., min_length=1)
    end_time: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    notes: Optional[str] = None

class StudySessionOut(StudySessionIn):
    id: int

class AdvisoryOut(BaseModel):
    code: str
    message: str
    weekStart: date
    weekEnd: date
    weeklyTotalMinutes: int
    weeklyTotalText: str

class WeeklyTotalOut(BaseModel):
    weekStart: date
    weekEnd: date
    totalMinutes: int
    totalText: str

class WorkShiftCreated(BaseModel):
    message: str
    id: int
    warning: Optional[AdvisoryOut] = None

class StudySessionCreated(BaseModel):
    message: str
    id: int
    weeklyTotalMinutes: int
    weeklyTotalText: str
    reminder: Optional[AdvisoryOut] = None

class StudySessionList(BaseModel):
    sessions: List[StudySessionOut]
    weekly: WeeklyTotalOut

# ---------- Generic ----------

class MessageOut(BaseModel):
    message: str

class CreatedOut(BaseModel):
    message: str
    id: int

class DeletedOut(BaseModel):
    message: str
    deleted: int
