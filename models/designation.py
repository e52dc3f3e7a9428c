from datetime import datetime
from . import db
from .base import iso, new_id


class PermissionMaster(db.Model):
    __tablename__ = "permission_master"

    permission_id = db.Column(db.String(36), primary_key=True, default=new_id)
    permission_key = db.Column(db.String(80), nullable=False, unique=True)
    permission_name = db.Column(db.String(120), nullable=False)
    permission_description = db.Column(db.String(255), nullable=False)
    permission_category = db.Column(db.String(40), nullable=False)
    permission_status = db.Column(db.String(20), nullable=False, default="ACTIVE")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<PermissionMaster {self.permission_key}>"


class DesignationMaster(db.Model):
    """
    Cargo (rol) dentro de una empresa.
    - Cada empresa define sus propios cargos.
    - Los permisos del cargo se asignan vía designation_permissions.
    """
    __tablename__ = "designation_master"

    designation_id = db.Column(db.String(36), primary_key=True, default=new_id)
    company_id = db.Column(db.String(36), db.ForeignKey("company_master.company_id"), nullable=False)

    designation_name = db.Column(db.String(120), nullable=False)
    designation_description = db.Column(db.String(255), nullable=True)
    designation_status = db.Column(db.String(20), nullable=False, default="ACTIVE")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    company = db.relationship("CompanyMaster", back_populates="designations")
    permissions = db.relationship(
        "DesignationPermission", back_populates="designation", cascade="all, delete-orphan"
    )

    @property
    def permission_keys(self) -> list[str]:
        return [dp.permission.permission_key for dp in self.permissions]

    def to_dict(self) -> dict:
        return {
            "designationId": self.designation_id,
            "companyId": self.company_id,
            "designationName": self.designation_name,
            "designationDescription": self.designation_description,
            "designationStatus": self.designation_status,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<DesignationMaster {self.designation_id} {self.designation_name} company={self.company_id}>"


class DesignationPermission(db.Model):
    __tablename__ = "designation_permissions"

    designation_permission_id = db.Column(db.String(36), primary_key=True, default=new_id)
    designation_id = db.Column(db.String(36), db.ForeignKey("designation_master.designation_id"), nullable=False)
    permission_id = db.Column(db.String(36), db.ForeignKey("permission_master.permission_id"), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    designation = db.relationship("DesignationMaster", back_populates="permissions")
    permission = db.relationship("PermissionMaster")

    __table_args__ = (
        db.UniqueConstraint("designation_id", "permission_id", name="uq_designation_permission"),
    )
