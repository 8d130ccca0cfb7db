# backend/servicebook/routers/company_services.py
# Company admins manage their own company's overrides; super admin manages any.

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_roles
from ..enums import Role
from ..models import (
    Company as DBCompany,
    CompanyService as DBCompanyService,
    Service as DBService,
)
from ..schemas.company_services import (
    CompanyServiceCreate,
    CompanyServiceUpdate,
    CompanyServiceRead,
)
from ..services.access_policy import Principal, check_company_scope

router = APIRouter(prefix="/company-services/{company_id}", tags=["company-services"])

company_admins = require_roles(Role.SUPER_ADMIN, Role.COMPANY_ADMIN)


def scoped_company(
    company_id: int,
    principal: Principal = Depends(company_admins),
    db: Session = Depends(get_db),
) -> DBCompany:
    check_company_scope(principal, company_id)
    company = db.get(DBCompany, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


def _get_attached(db: Session, company_id: int, service_id: int) -> DBCompanyService:
    obj = (
        db.query(DBCompanyService)
        .filter(
            DBCompanyService.company_id == company_id,
            DBCompanyService.service_id == service_id,
        )
        .first()
    )
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.get("/", response_model=list[CompanyServiceRead])
def list_company_services(
    active_only: bool = False,
    company: DBCompany = Depends(scoped_company),
    db: Session = Depends(get_db),
):
    query = db.query(DBCompanyService).filter(DBCompanyService.company_id == company.id)
    if active_only:
        query = query.filter(DBCompanyService.is_active == 1)
    return query.order_by(DBCompanyService.id.desc()).all()


@router.get("/{service_id}", response_model=CompanyServiceRead)
def get_company_service(
    service_id: int,
    company: DBCompany = Depends(scoped_company),
    db: Session = Depends(get_db),
):
    return _get_attached(db, company.id, service_id)


@router.post("/", response_model=CompanyServiceRead, status_code=status.HTTP_201_CREATED)
def attach_service(
    data: CompanyServiceCreate,
    company: DBCompany = Depends(scoped_company),
    db: Session = Depends(get_db),
):
    if not db.get(DBService, data.service_id):
        raise HTTPException(status_code=404, detail="Service not found")

    exists = (
        db.query(DBCompanyService)
        .filter(
            DBCompanyService.company_id == company.id,
            DBCompanyService.service_id == data.service_id,
        )
        .first()
    )
    if exists:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This service is already attached to the company",
        )

    obj = DBCompanyService(company_id=company.id, **data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{service_id}", response_model=CompanyServiceRead)
def update_company_service(
    service_id: int,
    data: CompanyServiceUpdate,
    company: DBCompany = Depends(scoped_company),
    db: Session = Depends(get_db),
):
    obj = _get_attached(db, company.id, service_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "is_active":
            if value is None:
                continue
            value = int(value)
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def detach_service(
    service_id: int,
    company: DBCompany = Depends(scoped_company),
    db: Session = Depends(get_db),
):
    obj = _get_attached(db, company.id, service_id)
    db.delete(obj)
    db.commit()
