from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from repositories.roster import RosterRepository
from schemas.roster import StudentCreate, StudentUpdate, StudentSchema
from typing import List

router = APIRouter(prefix="/api/v1/students", tags=["Students"])

# ===============================
#   STUDENT CRUD OPERATIONS
# ===============================

@router.get("/", response_model=List[StudentSchema])
def list_students(db: Session = Depends(get_db)):
    """All students, newest first, with parent and class embedded"""
    return RosterRepository(db).list_students()

@router.get("/{student_id}", response_model=StudentSchema)
def get_student(student_id: int, db: Session = Depends(get_db)):
    return RosterRepository(db).get_student(student_id)

@router.post("/", response_model=StudentSchema, status_code=201)
def add_student(item: StudentCreate, db: Session = Depends(get_db)):
    return RosterRepository(db).add_student(item)

@router.put("/{student_id}", response_model=StudentSchema)
def update_student(student_id: int, item: StudentUpdate, db: Session = Depends(get_db)):
    # Fee edits do not touch payments already generated
    return RosterRepository(db).update_student(student_id, item)

@router.delete("/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    RosterRepository(db).delete_student(student_id)
    return {"message": "Deleted"}
