"""Course API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from typing import List
from database.db_manager import DatabaseManager
from api.dependencies import get_current_user, get_db
from api.schemas import CreateCourseRequest
from models import Course, Hole, User

router = APIRouter()


@router.get("", response_model=List[Course])
async def list_courses(db: DatabaseManager = Depends(get_db)):
    return await db.courses.list_courses()


@router.get("/{course_id}", response_model=Course)
async def get_course(course_id: str, db: DatabaseManager = Depends(get_db)):
    course = await db.courses.get_course(course_id)
    if not course:
        raise HTTPException(404, "Course not found")
    return course


@router.get("/{course_id}/holes", response_model=List[Hole])
async def get_course_holes(course_id: str, db: DatabaseManager = Depends(get_db)):
    if not await db.courses.get_course(course_id):
        raise HTTPException(404, "Course not found")
    return await db.courses.get_holes(course_id)


@router.post("", response_model=Course, status_code=201)
async def create_course(
    req: CreateCourseRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    course = Course(
        name=req.name,
        location=req.location,
        description=req.description,
        total_holes=len(req.holes) or 18,
        holes=[Hole(**h.model_dump()) for h in req.holes],
    )
    return await db.courses.create_course(course)
