from models import db
from models.company import CompanyMaster, CompanyType
from models.designation import DesignationMaster, DesignationPermission, PermissionMaster
from models.membership import AssignmentStatus, UserCompanyAssignment
from models.relationship import CompanyRelationship, RelationshipType
from models.service import CompanyService, ServiceMaster
from models.user import UserMaster
from services.permissions import PERMISSIONS


SERVICES = [
    ("deal_portal", "Deal Portal", "Access to create, manage, and process deals"),
    ("reports", "Reports", "Access to view and export reports"),
    ("analytics", "Analytics", "Access to analytics dashboards"),
    ("user_management", "User Management", "Ability to manage users within the company"),
]

# company_id, nombre, tipo, es cliente, servicios habilitados
COMPANIES = [
    ("radian-id", "Radian", CompanyType.RADIAN, False, ["deal_portal", "reports", "analytics", "user_management"]),
    ("ftm-id", "FreshThyme (FTM)", CompanyType.MERCHANT, True, ["deal_portal", "reports", "analytics", "user_management"]),
    ("kroger-id", "Kroger", CompanyType.MERCHANT, True, ["deal_portal", "reports", "analytics", "user_management"]),
    ("coke-id", "Coca-Cola", CompanyType.SUPPLIER, True, ["deal_portal", "reports", "user_management"]),
    ("kehe-id", "KeHE Distributors", CompanyType.SUPPLIER, False, ["deal_portal", "reports"]),
    ("belvita-id", "Belvita", CompanyType.SUPPLIER, True, ["deal_portal", "reports", "user_management"]),
    ("abc-id", "ABC Brokers", CompanyType.BROKER, True, ["deal_portal", "reports"]),
]

RELATIONSHIPS = [
    ("ftm-coke-id", "ftm-id", "coke-id", RelationshipType.MERCHANT_SUPPLIER),
    ("ftm-kehe-id", "ftm-id", "kehe-id", RelationshipType.MERCHANT_SUPPLIER),
    ("ftm-belvita-id", "ftm-id", "belvita-id", RelationshipType.MERCHANT_SUPPLIER),
    ("kroger-coke-id", "kroger-id", "coke-id", RelationshipType.MERCHANT_SUPPLIER),
    ("kroger-kehe-id", "kroger-id", "kehe-id", RelationshipType.MERCHANT_SUPPLIER),
    ("abc-coke-id", "abc-id", "coke-id", RelationshipType.BROKER_SUPPLIER),
    ("abc-kehe-id", "abc-id", "kehe-id", RelationshipType.BROKER_SUPPLIER),
    ("abc-belvita-id", "abc-id", "belvita-id", RelationshipType.BROKER_SUPPLIER),
]

# designation_id, company_id, nombre, permisos
DESIGNATIONS = [
    ("radian-super-admin", "radian-id", "Super Admin", list(PERMISSIONS)),
    ("radian-account-mgr", "radian-id", "Account Manager", [
        "deals.view", "deals.create", "deals.edit", "deals.approve",
        "reports.view", "reports.export",
        "users.view", "users.invite",
        "admin.companies", "admin.services", "admin.relationships",
    ]),
    ("radian-support", "radian-id", "Support Specialist", ["deals.view", "reports.view", "users.view"]),
    ("ftm-admin", "ftm-id", "Admin", [
        "deals.view", "deals.create", "deals.edit", "deals.delete", "deals.approve", "deals.reject", "deals.review",
        "reports.view", "reports.export",
        "users.view", "users.invite", "users.manage",
        "roles.view", "roles.manage",
        "company.settings",
    ]),
    ("ftm-buyer", "ftm-id", "Buyer", ["deals.view", "deals.create", "reports.view"]),
    ("coke-sales-rep", "coke-id", "Sales Rep", ["deals.view", "deals.create", "deals.submit"]),
    ("abc-deal-coord", "abc-id", "Deal Coordinator", ["deals.view", "deals.create", "deals.edit"]),
]

# email, nombre, apellido, password, [(company_id, designation_id, relationship_id)]
USERS = [
    ("admin@demo.com", "Admin", "Demo", "admin1234", [("radian-id", "radian-super-admin", None)]),
    ("buyer@ftm.com", "Fiona", "Buyer", "buyer1234", [("ftm-id", "ftm-buyer", None)]),
    ("rep@coke.com", "Carl", "Rep", "rep1234", [
        ("coke-id", "coke-sales-rep", "ftm-coke-id"),
        ("coke-id", "coke-sales-rep", "kroger-coke-id"),
    ]),
]


def _get_or_create(model, ident, **values):
    obj = db.session.get(model, ident)
    if not obj:
        obj = model(**values)
        db.session.add(obj)
        db.session.flush()
    return obj


def seed_demo_data() -> None:
    """Carga idempotente de datos demo. Requiere app context."""

    # 1) Catálogo de servicios
    services = {}
    for key, name, description in SERVICES:
        s = db.session.query(ServiceMaster).filter_by(service_key=key).first()
        if not s:
            s = ServiceMaster(service_key=key, service_name=name, service_description=description)
            db.session.add(s)
            db.session.flush()
        services[key] = s

    # 2) Catálogo de permisos
    permissions = {}
    for key, meta in PERMISSIONS.items():
        p = db.session.query(PermissionMaster).filter_by(permission_key=key).first()
        if not p:
            p = PermissionMaster(
                permission_key=key,
                permission_name=meta["description"],
                permission_description=meta["description"],
                permission_category=meta["category"],
            )
            db.session.add(p)
            db.session.flush()
        permissions[key] = p

    # 3) Empresas + servicios habilitados
    for company_id, name, company_type, is_client, enabled in COMPANIES:
        _get_or_create(
            CompanyMaster, company_id,
            company_id=company_id, company_name=name, company_type=company_type, is_client=is_client,
        )
        for key in enabled:
            service_id = services[key].service_id
            cs = db.session.query(CompanyService).filter_by(company_id=company_id, service_id=service_id).first()
            if not cs:
                db.session.add(CompanyService(company_id=company_id, service_id=service_id, is_enabled=True))

    # 4) Relaciones entre empresas
    for rel_id, from_id, to_id, rel_type in RELATIONSHIPS:
        _get_or_create(
            CompanyRelationship, rel_id,
            company_relationship_id=rel_id, from_company_id=from_id, to_company_id=to_id, relationship_type=rel_type,
        )

    # 5) Cargos + permisos
    for designation_id, company_id, name, keys in DESIGNATIONS:
        d = _get_or_create(
            DesignationMaster, designation_id,
            designation_id=designation_id, company_id=company_id, designation_name=name,
        )
        current = set(d.permission_keys)
        for key in keys:
            if key not in current:
                d.permissions.append(DesignationPermission(permission=permissions[key]))

    # 6) Usuarios + asignaciones
    for email, first_name, last_name, password, assignments in USERS:
        user = db.session.query(UserMaster).filter_by(email=email).first()
        if not user:
            user = UserMaster(email=email, first_name=first_name, last_name=last_name)
            user.set_password(password)
            db.session.add(user)
            db.session.flush()

        for company_id, designation_id, rel_id in assignments:
            a = (
                db.session.query(UserCompanyAssignment)
                .filter_by(user_id=user.user_id, company_id=company_id, company_relationship_id=rel_id)
                .first()
            )
            if not a:
                db.session.add(UserCompanyAssignment(
                    user_id=user.user_id,
                    company_id=company_id,
                    designation_id=designation_id,
                    company_relationship_id=rel_id,
                    assignment_status=AssignmentStatus.ACTIVE,
                ))

    db.session.commit()


def run():
    from app import create_app

    app = create_app()
    with app.app_context():
        # No usamos db.create_all(): el esquema viene de las migraciones.
        # Asegúrate de haber corrido: flask db upgrade
        seed_demo_data()

        app.logger.info("Demo data seeded")
        print("Seed listo.")
        print("Login: admin@demo.com / admin1234 (Radian Super Admin)")


if __name__ == "__main__":
    run()
