from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import select, func, case, delete, or_

from life_organizer.core.errors import InvalidInput, NotFound
from life_organizer.core.security import RequestContext, get_context
from life_organizer.models.db import get_db
from life_organizer.models.entities import Task
from life_organizer.models.schemas import TaskIn, TaskUpdateIn, TaskPage, TaskSummary, CreatedOut, MessageOut

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

DEFAULT_LIMIT = 10
MAX_LIMIT = 50


def _task_out(t: Task) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "description": t.description,
        "due_date": t.due_date,
        "status": t.status,
        "is_starter": bool(t.is_starter),
        "created_at": t.created_at,
    }


def _to_int(raw, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


@router.get("", response_model=TaskPage)
def list_tasks(
    q: str = Query(""),
    status: str = Query("all", description="all | pending | completed"),
    page: str = Query("1"),
    limit: str = Query(str(DEFAULT_LIMIT)),
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    page_num = max(_to_int(page, 1) or 1, 1)
    limit_num = min(max(_to_int(limit, DEFAULT_LIMIT) or DEFAULT_LIMIT, 1), MAX_LIMIT)
    offset = (page_num - 1) * limit_num

    conditions = [Task.user_id == ctx.user_id]
    search = (q or "").strip()
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(Task.title.like(pattern), Task.description.like(pattern)))

    st = (status or "").strip().lower()
    if st == "completed":
        conditions.append(Task.status == "completed")
    elif st == "pending":
        conditions.append(Task.status != "completed")

    total = db.scalar(select(func.count(Task.id)).where(*conditions)) or 0
    total_pages = max(-(-total // limit_num), 1)

    rows = db.scalars(
        select(Task)
        .where(*conditions)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .limit(limit_num)
        .offset(offset)
    ).all()

    return {
        "page": page_num,
        "limit": limit_num,
        "total": total,
        "totalPages": total_pages,
        "tasks": [_task_out(t) for t in rows],
    }


@router.get("/summary", response_model=TaskSummary)
def task_summary(ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    row = db.execute(
        select(
            func.count(Task.id),
            func.sum(case((Task.status == "completed", 1), else_=0)),
            func.sum(case((Task.status != "completed", 1), else_=0)),
        ).where(Task.user_id == ctx.user_id)
    ).one()
    total = int(row[0] or 0)
    completed = int(row[1] or 0)
    pending = int(row[2] or 0)
    percent = 0 if total == 0 else int(round(completed / total * 100))
    return {"total": total, "completed": completed, "pending": pending, "percent": percent}


@router.post("", response_model=CreatedOut, status_code=201)
def create_task(payload: TaskIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    title = (payload.title or "").strip()
    if not title:
        raise InvalidInput("Title is required")
    t = Task(
        user_id=ctx.user_id,
        title=title,
        description=(payload.description or "").strip() or None,
        due_date=payload.due_date,
        status="pending",
    )
    db.add(t)
    db.commit()
    db.refresh(t)
    return {"message": "Task created", "id": t.id}


@router.put("/{task_id}", response_model=MessageOut)
def update_task(
    task_id: int, payload: TaskUpdateIn, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)
):
    t = db.get(Task, task_id)
    if not t or t.user_id != ctx.user_id:
        raise NotFound("Task not found")

    fields = payload.model_fields_set
    if "title" in fields:
        title = (payload.title or "").strip()
        if not title:
            raise InvalidInput("Title is required")
        t.title = title
    if "description" in fields:
        t.description = (payload.description or "").strip() or None
    if "due_date" in fields:
        t.due_date = payload.due_date
    if "status" in fields and payload.status is not None:
        t.status = payload.status.strip() or t.status

    db.commit()
    return {"message": "Task updated"}


@router.delete("/{task_id}", response_model=MessageOut)
def delete_task(task_id: int, ctx: RequestContext = Depends(get_context), db: Session = Depends(get_db)):
    res = db.execute(delete(Task).where(Task.id == task_id, Task.user_id == ctx.user_id))
    db.commit()
    if not res.rowcount:
        raise NotFound("Task not found")
    return {"message": "Task deleted"}
