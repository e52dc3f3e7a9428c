from datetime import datetime
from . import db
from .base import iso, new_id


class ServiceStatus:
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ServiceMaster(db.Model):
    """Catálogo de servicios que se pueden habilitar por empresa."""

    __tablename__ = "service_master"

    service_id = db.Column(db.String(36), primary_key=True, default=new_id)
    service_key = db.Column(db.String(60), nullable=False, unique=True)
    service_name = db.Column(db.String(120), nullable=False)
    service_description = db.Column(db.String(255), nullable=True)
    service_status = db.Column(db.String(20), nullable=False, default=ServiceStatus.ACTIVE, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "serviceId": self.service_id,
            "serviceKey": self.service_key,
            "serviceName": self.service_name,
            "serviceDescription": self.service_description,
            "serviceStatus": self.service_status,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<ServiceMaster {self.service_key}>"


class CompanyService(db.Model):
    """
    Override por empresa sobre el catálogo.
    Se crea solo cuando se habilita/deshabilita (upsert); si no existe la fila => deshabilitado.
    """

    __tablename__ = "company_services"

    company_service_id = db.Column(db.String(36), primary_key=True, default=new_id)
    company_id = db.Column(db.String(36), db.ForeignKey("company_master.company_id"), nullable=False)
    service_id = db.Column(db.String(36), db.ForeignKey("service_master.service_id"), nullable=False)

    is_enabled = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    company = db.relationship("CompanyMaster", back_populates="services")
    service = db.relationship("ServiceMaster")

    __table_args__ = (
        db.UniqueConstraint("company_id", "service_id", name="uq_company_service"),
    )

    def to_dict(self) -> dict:
        return {
            "companyServiceId": self.company_service_id,
            "companyId": self.company_id,
            "serviceId": self.service_id,
            "isEnabled": bool(self.is_enabled),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
            "service": self.service.to_dict() if self.service else None,
        }

    def __repr__(self) -> str:
        return f"<CompanyService company={self.company_id} service={self.service_id} enabled={self.is_enabled}>"
