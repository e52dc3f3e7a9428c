from datetime import datetime
from . import db
from .base import iso, new_id


class CompanyType:
    RADIAN = "RADIAN"
    MERCHANT = "MERCHANT"
    BROKER = "BROKER"
    SUPPLIER = "SUPPLIER"

    # Orden de los mensajes de error
    ORDERED = (RADIAN, MERCHANT, SUPPLIER, BROKER)
    ALL = set(ORDERED)


class CompanyStatus:
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"

    ALL = {ACTIVE, INACTIVE}


class CompanyMaster(db.Model):
    __tablename__ = "company_master"

    company_id = db.Column(db.String(36), primary_key=True, default=new_id)
    company_name = db.Column(db.String(160), nullable=False)

    # Define qué relaciones puede tener la empresa (ver services.relationships)
    company_type = db.Column(db.String(20), nullable=False)
    company_status = db.Column(db.String(20), nullable=False, default=CompanyStatus.ACTIVE)
    is_client = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    designations = db.relationship("DesignationMaster", back_populates="company")
    services = db.relationship("CompanyService", back_populates="company")
    user_assignments = db.relationship("UserCompanyAssignment", back_populates="company")

    relationships_as_from = db.relationship(
        "CompanyRelationship",
        foreign_keys="CompanyRelationship.from_company_id",
        back_populates="from_company",
    )
    relationships_as_to = db.relationship(
        "CompanyRelationship",
        foreign_keys="CompanyRelationship.to_company_id",
        back_populates="to_company",
    )

    def summary(self) -> dict:
        return {
            "companyId": self.company_id,
            "companyName": self.company_name,
            "companyType": self.company_type,
        }

    def to_dict(self) -> dict:
        return {
            **self.summary(),
            "companyStatus": self.company_status,
            "isClient": bool(self.is_client),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<CompanyMaster {self.company_id} {self.company_name} type={self.company_type}>"
