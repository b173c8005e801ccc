from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from repositories.roster import RosterRepository
from schemas.roster import (
    ClassCreate, ClassUpdate, ClassSchema, ParentCreate, ParentUpdate, ParentSchema,
)
from typing import List

router = APIRouter(prefix="/api/v1/masters", tags=["Master Records"])

# =======================
# 1. CLASS APIs
# =======================
@router.get("/classes", response_model=List[ClassSchema])
def list_classes(db: Session = Depends(get_db)):
    return RosterRepository(db).list_classes()

@router.post("/classes", response_model=ClassSchema, status_code=201)
def create_class(item: ClassCreate, db: Session = Depends(get_db)):
    return RosterRepository(db).add_class(item)

@router.put("/classes/{class_id}", response_model=ClassSchema)
def update_class(class_id: int, item: ClassUpdate, db: Session = Depends(get_db)):
    return RosterRepository(db).update_class(class_id, item)

@router.delete("/classes/{class_id}")
def delete_class(class_id: int, db: Session = Depends(get_db)):
    RosterRepository(db).delete_class(class_id)
    return {"message": "Deleted"}

# =======================
# 2. PARENT APIs
# =======================
@router.get("/parents", response_model=List[ParentSchema])
def list_parents(db: Session = Depends(get_db)):
    return RosterRepository(db).list_parents()

@router.post("/parents", response_model=ParentSchema, status_code=201)
def create_parent(item: ParentCreate, db: Session = Depends(get_db)):
    return RosterRepository(db).add_parent(item)

@router.put("/parents/{parent_id}", response_model=ParentSchema)
def update_parent(parent_id: int, item: ParentUpdate, db: Session = Depends(get_db)):
    return RosterRepository(db).update_parent(parent_id, item)

@router.delete("/parents/{parent_id}")
def delete_parent(parent_id: int, db: Session = Depends(get_db)):
    RosterRepository(db).delete_parent(parent_id)
    return {"message": "Deleted"}
