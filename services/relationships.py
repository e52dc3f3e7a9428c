from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from models.company import CompanyMaster, CompanyType
from models.membership import AssignmentStatus, UserCompanyAssignment
from models.relationship import CompanyRelationship, RelationshipStatus, RelationshipType
from services.errors import DuplicateError, NotFoundError, ValidationError


# tipo de relación -> (tipo de fromCompany, tipo de toCompany)
PAIRING_RULES = {
    RelationshipType.MERCHANT_SUPPLIER: (CompanyType.MERCHANT, CompanyType.SUPPLIER),
    RelationshipType.BROKER_SUPPLIER: (CompanyType.BROKER, CompanyType.SUPPLIER),
}


def _str_or_none(val) -> str | None:
    # Se compara tal cual llega: sin strip ni cambio de mayúsculas
    if not isinstance(val, str) or not val:
        return None
    return val


def _get_or_404(db: Session, relationship_id: str, *options) -> CompanyRelationship:
    query = db.query(CompanyRelationship)
    if options:
        query = query.options(*options)
    rel = query.filter(CompanyRelationship.company_relationship_id == relationship_id).first()
    if not rel:
        raise NotFoundError("Relationship not found")
    return rel


def check_pairing(relationship_type: str, from_company: CompanyMaster, to_company: CompanyMaster) -> None:
    """
    Valida que los tipos de empresa calcen con el tipo de relación.
    PARTNER no tiene restricción.
    """
    rule = PAIRING_RULES.get(relationship_type)
    if not rule:
        return
    expected_from, expected_to = rule
    if from_company.company_type != expected_from:
        raise ValidationError(
            f"For {relationship_type} relationship, fromCompany must be a {expected_from}"
        )
    if to_company.company_type != expected_to:
        raise ValidationError(
            f"For {relationship_type} relationship, toCompany must be a {expected_to}"
        )


def list_relationships(db: Session) -> list[tuple[CompanyRelationship, int]]:
    counts = dict(
        db.query(UserCompanyAssignment.company_relationship_id, func.count(UserCompanyAssignment.user_company_assignment_id))
        .filter(UserCompanyAssignment.company_relationship_id.isnot(None))
        .group_by(UserCompanyAssignment.company_relationship_id)
        .all()
    )
    relationships = (
        db.query(CompanyRelationship)
        .options(joinedload(CompanyRelationship.from_company), joinedload(CompanyRelationship.to_company))
        .order_by(CompanyRelationship.created_at.desc())
        .all()
    )
    return [(r, int(counts.get(r.company_relationship_id, 0))) for r in relationships]


def create_relationship(
    db: Session,
    *,
    from_company_id,
    to_company_id,
    relationship_type,
) -> CompanyRelationship:
    from_company_id = _str_or_none(from_company_id)
    to_company_id = _str_or_none(to_company_id)
    relationship_type = _str_or_none(relationship_type)

    if not from_company_id or not to_company_id or not relationship_type:
        raise ValidationError("fromCompanyId, toCompanyId, and relationshipType are required")

    from_company = db.get(CompanyMaster, from_company_id)
    if not from_company:
        raise NotFoundError("From company not found")

    to_company = db.get(CompanyMaster, to_company_id)
    if not to_company:
        raise NotFoundError("To company not found")

    if relationship_type not in RelationshipType.ALL:
        raise ValidationError(
            "Invalid relationship type. Must be one of: " + ", ".join(RelationshipType.ORDERED)
        )

    check_pairing(relationship_type, from_company, to_company)

    existing = (
        db.query(CompanyRelationship.company_relationship_id)
        .filter_by(
            from_company_id=from_company_id,
            to_company_id=to_company_id,
            relationship_type=relationship_type,
        )
        .first()
    )
    if existing:
        raise DuplicateError("This relationship already exists")

    rel = CompanyRelationship(
        from_company_id=from_company_id,
        to_company_id=to_company_id,
        relationship_type=relationship_type,
        relationship_status=RelationshipStatus.ACTIVE,
    )
    db.add(rel)
    try:
        db.flush()
    except IntegrityError:
        # Otra petición creó la misma relación entre el chequeo y el insert
        db.rollback()
        raise DuplicateError("This relationship already exists")
    return rel


def get_relationship_detail(db: Session, relationship_id: str) -> CompanyRelationship:
    return _get_or_404(
        db,
        relationship_id,
        joinedload(CompanyRelationship.from_company),
        joinedload(CompanyRelationship.to_company),
        selectinload(CompanyRelationship.user_assignments).joinedload(UserCompanyAssignment.user),
        selectinload(CompanyRelationship.user_assignments).joinedload(UserCompanyAssignment.designation),
    )


def update_relationship(db: Session, relationship_id: str, *, relationship_status=None) -> CompanyRelationship:
    rel = _get_or_404(db, relationship_id)

    # Un status vacío (None, "", false) no cambia nada
    if relationship_status:
        if not isinstance(relationship_status, str) or relationship_status not in RelationshipStatus.ALL:
            raise ValidationError("Invalid status. Must be ACTIVE, INACTIVE, or PENDING")
        rel.relationship_status = relationship_status

    db.flush()
    return rel


def deactivate_relationship(db: Session, relationship_id: str) -> tuple[CompanyRelationship, int]:
    """
    Baja lógica: primero las asignaciones activas, luego la relación.
    Todo dentro de la misma transacción; el commit lo hace quien llama.
    Devuelve (relación, cantidad de asignaciones desactivadas).
    """
    rel = _get_or_404(db, relationship_id)

    deactivated = (
        db.query(UserCompanyAssignment)
        .filter(
            UserCompanyAssignment.company_relationship_id == rel.company_relationship_id,
            UserCompanyAssignment.assignment_status == AssignmentStatus.ACTIVE,
        )
        .update(
            {UserCompanyAssignment.assignment_status: AssignmentStatus.INACTIVE},
            synchronize_session="fetch",
        )
    )

    rel.relationship_status = RelationshipStatus.INACTIVE
    db.flush()
    return rel, int(deactivated or 0)


# -------------------------
# Serialización (JSON API)
# -------------------------
def relationship_list_item(rel: CompanyRelationship, assignment_count: int) -> dict:
    return {
        **rel.to_dict(),
        "fromCompany": rel.from_company.summary(),
        "toCompany": rel.to_company.summary(),
        "_count": {"userAssignments": assignment_count},
    }


def relationship_with_companies(rel: CompanyRelationship) -> dict:
    return {
        **rel.to_dict(),
        "fromCompany": rel.from_company.to_dict(),
        "toCompany": rel.to_company.to_dict(),
    }


def relationship_detail(rel: CompanyRelationship) -> dict:
    return {
        **relationship_with_companies(rel),
        "userAssignments": [
            {
                **a.to_dict(),
                "user": a.user.summary(),
                "designation": a.designation.to_dict(),
            }
            for a in rel.user_assignments
        ],
    }
