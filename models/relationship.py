from datetime import datetime
from . import db
from .base import iso, new_id


class RelationshipType:
    MERCHANT_SUPPLIER = "MERCHANT_SUPPLIER"
    BROKER_SUPPLIER = "BROKER_SUPPLIER"
    PARTNER = "PARTNER"

    # Orden estable para los mensajes de error
    ORDERED = (MERCHANT_SUPPLIER, BROKER_SUPPLIER, PARTNER)
    ALL = set(ORDERED)


class RelationshipStatus:
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"

    ALL = {ACTIVE, INACTIVE, PENDING}


class CompanyRelationship(db.Model):
    __tablename__ = "company_relationship"

    company_relationship_id = db.Column(db.String(36), primary_key=True, default=new_id)

    from_company_id = db.Column(db.String(36), db.ForeignKey("company_master.company_id"), nullable=False)
    to_company_id = db.Column(db.String(36), db.ForeignKey("company_master.company_id"), nullable=False)

    relationship_type = db.Column(db.String(30), nullable=False)
    relationship_status = db.Column(db.String(20), nullable=False, default=RelationshipStatus.ACTIVE)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    from_company = db.relationship(
        "CompanyMaster", foreign_keys=[from_company_id], back_populates="relationships_as_from"
    )
    to_company = db.relationship(
        "CompanyMaster", foreign_keys=[to_company_id], back_populates="relationships_as_to"
    )
    user_assignments = db.relationship("UserCompanyAssignment", back_populates="company_relationship")

    __table_args__ = (
        db.UniqueConstraint(
            "from_company_id", "to_company_id", "relationship_type",
            name="uq_relationship_from_to_type",
        ),
    )

    @property
    def display_name(self) -> str:
        return f"{self.from_company.company_name} ↔ {self.to_company.company_name}"

    def to_dict(self) -> dict:
        return {
            "companyRelationshipId": self.company_relationship_id,
            "fromCompanyId": self.from_company_id,
            "toCompanyId": self.to_company_id,
            "relationshipType": self.relationship_type,
            "relationshipStatus": self.relationship_status,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return (
            f"<CompanyRelationship {self.company_relationship_id} "
            f"{self.from_company_id}->{self.to_company_id} {self.relationship_type}>"
        )
