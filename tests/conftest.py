import pytest

from app import create_app
from config import Config
from models import db
from models.company import CompanyMaster, CompanyType
from models.designation import DesignationMaster, DesignationPermission, PermissionMaster
from models.membership import AssignmentStatus, UserCompanyAssignment
from models.relationship import CompanyRelationship
from models.service import ServiceMaster, ServiceStatus
from models.user import UserMaster
from services.permissions import PERMISSIONS


@pytest.fixture
def app(tmp_path):
    config = type(
        "TestConfig",
        (Config,),
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "LOG_DIR": str(tmp_path / "logs"),
        },
    )
    app = create_app(config)
    with app.app_context():
        db.create_all()

    # Sin app context activo durante los requests: cada request abre el suyo
    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# -------------------------
# Fábricas (requieren app context)
# -------------------------
def make_company(company_id: str, company_type: str, name: str | None = None) -> str:
    c = CompanyMaster(company_id=company_id, company_name=name or company_id.upper(), company_type=company_type)
    db.session.add(c)
    db.session.commit()
    return c.company_id


def make_designation(company_id: str, name: str, permission_keys) -> str:
    d = DesignationMaster(company_id=company_id, designation_name=name)
    for key in permission_keys:
        p = db.session.query(PermissionMaster).filter_by(permission_key=key).first()
        if not p:
            meta = PERMISSIONS.get(key, {"description": key, "category": "OTHER"})
            p = PermissionMaster(
                permission_key=key,
                permission_name=key,
                permission_description=meta["description"],
                permission_category=meta["category"],
            )
            db.session.add(p)
        d.permissions.append(DesignationPermission(permission=p))
    db.session.add(d)
    db.session.commit()
    return d.designation_id


def make_user(email: str, password: str = "secret123", first_name: str | None = None) -> str:
    u = UserMaster(email=email, first_name=first_name or email.split("@")[0].title(), last_name="Tester")
    u.set_password(password)
    db.session.add(u)
    db.session.commit()
    return u.user_id


def assign(user_id, company_id, designation_id, relationship_id=None, status=AssignmentStatus.ACTIVE) -> str:
    a = UserCompanyAssignment(
        user_id=user_id,
        company_id=company_id,
        designation_id=designation_id,
        company_relationship_id=relationship_id,
        assignment_status=status,
    )
    db.session.add(a)
    db.session.commit()
    return a.user_company_assignment_id


def make_relationship(from_id, to_id, relationship_type, **kwargs) -> str:
    rel = CompanyRelationship(
        from_company_id=from_id, to_company_id=to_id, relationship_type=relationship_type, **kwargs
    )
    db.session.add(rel)
    db.session.commit()
    return rel.company_relationship_id


def make_service(key: str, name: str, status: str = ServiceStatus.ACTIVE) -> str:
    s = ServiceMaster(service_key=key, service_name=name, service_description=f"{name} service", service_status=status)
    db.session.add(s)
    db.session.commit()
    return s.service_id


def login(client, email: str, password: str = "secret123"):
    client.post("/login", data={"email": email, "password": password})
    # Con una sola asignación el contexto se selecciona solo
    return client.get("/select-context")


# -------------------------
# Escenario base
# -------------------------
@pytest.fixture
def companies(app):
    with app.app_context():
        return {
            "radian": make_company("radian", CompanyType.RADIAN, "Radian"),
            "m1": make_company("m1", CompanyType.MERCHANT, "FreshThyme"),
            "s1": make_company("s1", CompanyType.SUPPLIER, "Coca-Cola"),
            "s2": make_company("s2", CompanyType.SUPPLIER, "KeHE"),
            "b1": make_company("b1", CompanyType.BROKER, "ABC Brokers"),
        }


@pytest.fixture
def admin_user(app, companies):
    with app.app_context():
        designation_id = make_designation("radian", "Super Admin", list(PERMISSIONS))
        user_id = make_user("admin@test.com", first_name="Ada")
        assign(user_id, "radian", designation_id)
        return user_id


@pytest.fixture
def admin_client(client, admin_user):
    login(client, "admin@test.com")
    return client


@pytest.fixture
def viewer_client(app, companies):
    with app.app_context():
        designation_id = make_designation("m1", "Viewer", ["deals.view"])
        user_id = make_user("viewer@test.com")
        assign(user_id, "m1", designation_id)
    client = app.test_client()
    login(client, "viewer@test.com")
    return client
