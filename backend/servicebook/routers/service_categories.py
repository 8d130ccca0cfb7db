# backend/servicebook/routers/service_categories.py
# Reads: staff roles. Writes: super admin. DELETE = soft-delete (is_active)

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_roles
from ..enums import Role, ServiceCategoryType
from ..models import ServiceCategory as DBServiceCategory
from ..schemas.service_categories import (
    ServiceCategoryCreate,
    ServiceCategoryUpdate,
    ServiceCategoryRead,
)

router = APIRouter(prefix="/service-categories", tags=["service-categories"])

staff_only = Depends(require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN, Role.MEMBER))
super_admin_only = Depends(require_roles(Role.SUPER_ADMIN))


def _ensure_unique_slug(db: Session, slug: str, exclude_id: int | None = None) -> None:
    query = db.query(DBServiceCategory).filter(DBServiceCategory.slug == slug)
    if exclude_id is not None:
        query = query.filter(DBServiceCategory.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Service category with this slug already exists",
        )


def _list(db: Session, type: ServiceCategoryType | None, active_only: bool):
    query = db.query(DBServiceCategory)
    if active_only:
        query = query.filter(DBServiceCategory.is_active == 1)
    if type:
        query = query.filter(DBServiceCategory.type == type.value)
    return query.order_by(DBServiceCategory.name).all()


@router.get("/", response_model=list[ServiceCategoryRead], dependencies=[staff_only])
def list_categories(type: ServiceCategoryType | None = None, db: Session = Depends(get_db)):
    return _list(db, type, active_only=False)


@router.get("/active", response_model=list[ServiceCategoryRead], dependencies=[staff_only])
def list_active_categories(type: ServiceCategoryType | None = None, db: Session = Depends(get_db)):
    return _list(db, type, active_only=True)


@router.get("/{id}", response_model=ServiceCategoryRead, dependencies=[staff_only])
def get_category(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBServiceCategory, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post(
    "/",
    response_model=ServiceCategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[super_admin_only],
)
def create_category(
    data: ServiceCategoryCreate,
    db: Session = Depends(get_db),
):
    _ensure_unique_slug(db, data.slug)

    obj = DBServiceCategory(
        name=data.name,
        type=data.type.value,
        slug=data.slug,
        description=data.description,
        is_active=int(data.is_active),
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=ServiceCategoryRead, dependencies=[super_admin_only])
def update_category(
    id: int,
    data: ServiceCategoryUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBServiceCategory, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if "slug" in updates:
        _ensure_unique_slug(db, updates["slug"], exclude_id=id)
    if "type" in updates:
        updates["type"] = updates["type"].value
    if "is_active" in updates:
        updates["is_active"] = int(updates["is_active"])

    for field, value in updates.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[super_admin_only])
def delete_category(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBServiceCategory, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()
