from datetime import datetime
from . import db
from .base import iso, new_id


class AssignmentStatus:
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"

    ALL = {ACTIVE, INACTIVE}

class UserCompanyAssignment(db.Model):
    __tablename__ = "user_company_assignments"

    user_company_assignment_id = db.Column(db.String(36), primary_key=True, default=new_id)

    user_id = db.Column(db.String(36), db.ForeignKey("user_master.user_id"), nullable=False)
    company_id = db.Column(db.String(36), db.ForeignKey("company_master.company_id"), nullable=False)
    designation_id = db.Column(db.String(36), db.ForeignKey("designation_master.designation_id"), nullable=False)

    # Si el usuario trabaja dentro de una relación (ej. Merchant ↔ Supplier) queda amarrado a ella.
    # NULL: acceso a la empresa sin relación específica.
    company_relationship_id = db.Column(
        db.String(36),
        db.ForeignKey("company_relationship.company_relationship_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    assignment_status = db.Column(db.String(20), nullable=False, default=AssignmentStatus.ACTIVE)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = db.relationship("UserMaster", back_populates="company_assignments")
    company = db.relationship("CompanyMaster", back_populates="user_assignments")
    designation = db.relationship("DesignationMaster")
    company_relationship = db.relationship("CompanyRelationship", back_populates="user_assignments")

    def to_dict(self) -> dict:
        return {
            "userCompanyAssignmentId": self.user_company_assignment_id,
            "userId": self.user_id,
            "companyId": self.company_id,
            "designationId": self.designation_id,
            "companyRelationshipId": self.company_relationship_id,
            "assignmentStatus": self.assignment_status,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return (
            f"<UserCompanyAssignment user={self.user_id} company={self.company_id} "
            f"relationship={self.company_relationship_id} status={self.assignment_status}>"
        )
