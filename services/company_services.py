from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.company import CompanyMaster
from models.service import CompanyService, ServiceMaster, ServiceStatus
from services.errors import NotFoundError, ValidationError


def list_active_services(db: Session) -> list[ServiceMaster]:
    return (
        db.query(ServiceMaster)
        .filter(ServiceMaster.service_status == ServiceStatus.ACTIVE)
        .order_by(ServiceMaster.service_name.asc())
        .all()
    )


def services_for_company(db: Session, company_id: str | None) -> list[dict]:
    """
    Catálogo activo ordenado por nombre.
    Con company_id: cada servicio lleva isEnabled según el override de la empresa (False si no hay fila).
    No se valida que la empresa exista: una empresa desconocida ve todo deshabilitado.
    """
    services = list_active_services(db)
    if not company_id:
        return [s.to_dict() for s in services]

    enabled_map = dict(
        db.query(CompanyService.service_id, CompanyService.is_enabled)
        .filter(CompanyService.company_id == company_id)
        .all()
    )
    return [
        {**s.to_dict(), "isEnabled": bool(enabled_map.get(s.service_id, False))}
        for s in services
    ]


def set_company_service(db: Session, *, company_id, service_id, is_enabled) -> CompanyService:
    """Upsert sobre (company_id, service_id)."""
    if (
        not isinstance(company_id, str)
        or not company_id
        or not isinstance(service_id, str)
        or not service_id
        or not isinstance(is_enabled, bool)
    ):
        raise ValidationError("companyId, serviceId, and isEnabled are required")

    if not db.get(CompanyMaster, company_id):
        raise NotFoundError("Company not found")

    if not db.get(ServiceMaster, service_id):
        raise NotFoundError("Service not found")

    cs = _find(db, company_id, service_id)
    if cs:
        cs.is_enabled = is_enabled
        db.flush()
        return cs

    cs = CompanyService(company_id=company_id, service_id=service_id, is_enabled=is_enabled)
    db.add(cs)
    try:
        db.flush()
    except IntegrityError:
        # Insert concurrente del mismo par: se actualiza la fila ganadora
        db.rollback()
        cs = _find(db, company_id, service_id)
        cs.is_enabled = is_enabled
        db.flush()
    return cs


def _find(db: Session, company_id: str, service_id: str) -> CompanyService | None:
    return (
        db.query(CompanyService)
        .filter_by(company_id=company_id, service_id=service_id)
        .first()
    )
