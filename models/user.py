from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from . import db, login_manager
from .base import iso, new_id


class UserStatus:
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class UserMaster(db.Model, UserMixin):
    __tablename__ = "user_master"

    user_id = db.Column(db.String(36), primary_key=True, default=new_id)

    first_name = db.Column(db.String(80), nullable=False)
    middle_name = db.Column(db.String(80), nullable=True)
    last_name = db.Column(db.String(80), nullable=False)
    email = db.Column(db.String(180), nullable=False, unique=True, index=True)
    phone = db.Column(db.String(40), nullable=True)

    password_hash = db.Column(db.String(255), nullable=False)

    status = db.Column(db.String(20), default=UserStatus.ACTIVE, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    company_assignments = db.relationship("UserCompanyAssignment", back_populates="user")

    def get_id(self) -> str:
        return self.user_id

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def summary(self) -> dict:
        return {
            "userId": self.user_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
        }

    def to_dict(self) -> dict:
        return {
            **self.summary(),
            "phone": self.phone,
            "status": self.status,
            "createdAt": iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<UserMaster {self.user_id} {self.email}>"

@login_manager.user_loader
def load_user(user_id: str):
    return db.session.get(UserMaster, user_id)
