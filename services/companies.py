from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from models.company import CompanyMaster, CompanyStatus, CompanyType
from models.designation import DesignationMaster
from models.membership import AssignmentStatus, UserCompanyAssignment
from models.relationship import CompanyRelationship
from models.service import CompanyService
from services.errors import NotFoundError, ValidationError


def _count_by(db: Session, column, key_column) -> dict:
    return dict(db.query(key_column, func.count(column)).group_by(key_column).all())


def _get_or_404(db: Session, company_id: str, *options) -> CompanyMaster:
    query = db.query(CompanyMaster)
    if options:
        query = query.options(*options)
    company = query.filter(CompanyMaster.company_id == company_id).first()
    if not company:
        raise NotFoundError("Company not found")
    return company


def list_companies(db: Session) -> list[tuple[CompanyMaster, dict]]:
    """Empresas (más recientes primero) con sus conteos de asignaciones, cargos y servicios."""
    assignments = _count_by(db, UserCompanyAssignment.user_company_assignment_id, UserCompanyAssignment.company_id)
    designations = _count_by(db, DesignationMaster.designation_id, DesignationMaster.company_id)
    services = _count_by(db, CompanyService.company_service_id, CompanyService.company_id)

    companies = (
        db.query(CompanyMaster)
        .options(
            selectinload(CompanyMaster.relationships_as_from).joinedload(CompanyRelationship.to_company),
            selectinload(CompanyMaster.relationships_as_to).joinedload(CompanyRelationship.from_company),
        )
        .order_by(CompanyMaster.created_at.desc())
        .all()
    )
    return [
        (
            c,
            {
                "userAssignments": int(assignments.get(c.company_id, 0)),
                "designations": int(designations.get(c.company_id, 0)),
                "services": int(services.get(c.company_id, 0)),
            },
        )
        for c in companies
    ]


def create_company(db: Session, *, company_name, company_type, is_client=None) -> CompanyMaster:
    if not isinstance(company_name, str) or not company_name or not isinstance(company_type, str) or not company_type:
        raise ValidationError("Company name and type are required")

    if company_type not in CompanyType.ALL:
        raise ValidationError(
            "Invalid company type. Must be one of: " + ", ".join(CompanyType.ORDERED)
        )

    company = CompanyMaster(
        company_name=company_name,
        company_type=company_type,
        is_client=is_client if isinstance(is_client, bool) else False,
        company_status=CompanyStatus.ACTIVE,
    )
    db.add(company)
    db.flush()
    return company


def get_company_detail(db: Session, company_id: str) -> CompanyMaster:
    return _get_or_404(
        db,
        company_id,
        selectinload(CompanyMaster.designations),
        selectinload(CompanyMaster.services).joinedload(CompanyService.service),
        selectinload(CompanyMaster.relationships_as_from).joinedload(CompanyRelationship.to_company),
        selectinload(CompanyMaster.relationships_as_to).joinedload(CompanyRelationship.from_company),
    )


def update_company(
    db: Session,
    company_id: str,
    *,
    company_name=None,
    company_type=None,
    is_client=None,
    company_status=None,
) -> CompanyMaster:
    """Solo cambia los campos que vienen con valor; isClient solo si es booleano."""
    company = _get_or_404(db, company_id)

    if company_type:
        if not isinstance(company_type, str) or company_type not in CompanyType.ALL:
            raise ValidationError("Invalid company type")

    if company_status:
        if not isinstance(company_status, str) or company_status not in CompanyStatus.ALL:
            raise ValidationError("Invalid company status. Must be ACTIVE or INACTIVE")

    if company_name:
        if not isinstance(company_name, str):
            raise ValidationError("Invalid company name")
        company.company_name = company_name
    if company_type:
        company.company_type = company_type
    if isinstance(is_client, bool):
        company.is_client = is_client
    if company_status:
        company.company_status = company_status

    db.flush()
    return company


def deactivate_company(db: Session, company_id: str) -> CompanyMaster:
    """Baja lógica. No se permite mientras la empresa tenga usuarios activos."""
    company = _get_or_404(db, company_id)

    active_users = (
        db.query(UserCompanyAssignment.user_company_assignment_id)
        .filter(
            UserCompanyAssignment.company_id == company.company_id,
            UserCompanyAssignment.assignment_status == AssignmentStatus.ACTIVE,
        )
        .count()
    )
    if active_users:
        raise ValidationError("Cannot delete company with active user assignments")

    company.company_status = CompanyStatus.INACTIVE
    db.flush()
    return company


# -------------------------
# Serialización (JSON API)
# -------------------------
def company_list_item(company: CompanyMaster, counts: dict) -> dict:
    return {
        **company.to_dict(),
        "_count": counts,
        "relationshipsAsFrom": [
            {**r.to_dict(), "toCompany": r.to_company.summary()} for r in company.relationships_as_from
        ],
        "relationshipsAsTo": [
            {**r.to_dict(), "fromCompany": r.from_company.summary()} for r in company.relationships_as_to
        ],
    }


def company_detail(db: Session, company: CompanyMaster) -> dict:
    assignment_counts = dict(
        db.query(UserCompanyAssignment.designation_id, func.count(UserCompanyAssignment.user_company_assignment_id))
        .filter(UserCompanyAssignment.company_id == company.company_id)
        .group_by(UserCompanyAssignment.designation_id)
        .all()
    )
    return {
        **company.to_dict(),
        "designations": [
            {**d.to_dict(), "_count": {"userAssignments": int(assignment_counts.get(d.designation_id, 0))}}
            for d in company.designations
        ],
        "services": [cs.to_dict() for cs in company.services],
        "relationshipsAsFrom": [
            {**r.to_dict(), "toCompany": r.to_company.to_dict()} for r in company.relationships_as_from
        ],
        "relationshipsAsTo": [
            {**r.to_dict(), "fromCompany": r.from_company.to_dict()} for r in company.relationships_as_to
        ],
    }
