# backend/servicebook/routers/services.py
# Catalog reads are public. Writes: super admin. DELETE = soft-delete (is_active)

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_roles
from ..enums import Role
from ..models import Service as DBService, ServiceCategory as DBServiceCategory
from ..schemas.services import (
    ServiceCreate,
    ServiceUpdate,
    ServiceRead,
)

router = APIRouter(prefix="/services", tags=["services"])

super_admin_only = Depends(require_roles(Role.SUPER_ADMIN))


def _ensure_category(db: Session, category_id: int | None) -> None:
    if category_id is not None and not db.get(DBServiceCategory, category_id):
        raise HTTPException(status_code=404, detail="Service category not found")


@router.get("/", response_model=list[ServiceRead])
def list_services(
    category_id: int | None = None,
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    query = db.query(DBService).filter(DBService.is_active == 1)
    if category_id is not None:
        query = query.filter(DBService.category_id == category_id)
    if min_price is not None:
        query = query.filter(DBService.price >= min_price)
    if max_price is not None:
        query = query.filter(DBService.price <= max_price)
    return query.order_by(DBService.name).all()


@router.get("/category/{category_id}", response_model=list[ServiceRead])
def list_services_by_category(category_id: int, db: Session = Depends(get_db)):
    _ensure_category(db, category_id)
    return (
        db.query(DBService)
        .filter(DBService.category_id == category_id, DBService.is_active == 1)
        .order_by(DBService.name)
        .all()
    )


@router.get("/{id}", response_model=ServiceRead)
def get_service(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBService, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post(
    "/",
    response_model=ServiceRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[super_admin_only],
)
def create_service(
    data: ServiceCreate,
    db: Session = Depends(get_db),
):
    _ensure_category(db, data.category_id)

    obj = DBService(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=ServiceRead, dependencies=[super_admin_only])
def update_service(
    id: int,
    data: ServiceUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBService, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if "category_id" in updates:
        _ensure_category(db, updates["category_id"])
    if "is_active" in updates:
        updates["is_active"] = int(updates["is_active"])

    for field, value in updates.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[super_admin_only])
def delete_service(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBService, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()
