from datetime import datetime, timedelta

import pytest

from models import db
from models.membership import AssignmentStatus, UserCompanyAssignment
from models.relationship import CompanyRelationship, RelationshipStatus, RelationshipType
from tests.conftest import assign, make_designation, make_relationship, make_user


def _count_relationships(app) -> int:
    with app.app_context():
        return db.session.query(CompanyRelationship).count()


class TestCreateRelationship:
    def test_merchant_supplier_is_created_active(self, app, admin_client):
        resp = admin_client.post("/api/relationships", json={
            "fromCompanyId": "m1",
            "toCompanyId": "s1",
            "relationshipType": "MERCHANT_SUPPLIER",
        })

        assert resp.status_code == 201
        data = resp.get_json()
        assert data["relationshipStatus"] == "ACTIVE"
        assert data["fromCompany"]["companyType"] == "MERCHANT"
        assert data["toCompany"]["companyType"] == "SUPPLIER"
        assert data["fromCompany"]["companyName"] == "FreshThyme"

        with app.app_context():
            rel = db.session.get(CompanyRelationship, data["companyRelationshipId"])
            assert rel.from_company.company_type == "MERCHANT"
            assert rel.to_company.company_type == "SUPPLIER"

    def test_to_company_must_be_supplier(self, app, admin_client):
        resp = admin_client.post("/api/relationships", json={
            "fromCompanyId": "m1",
            "toCompanyId": "b1",
            "relationshipType": "MERCHANT_SUPPLIER",
        })

        assert resp.status_code == 400
        assert "must be a SUPPLIER" in resp.get_json()["error"]
        assert _count_relationships(app) == 0

    def test_from_company_must_be_merchant(self, app, admin_client):
        resp = admin_client.post("/api/relationships", json={
            "fromCompanyId": "s2",
            "toCompanyId": "s1",
            "relationshipType": "MERCHANT_SUPPLIER",
        })

        assert resp.status_code == 400
        assert "fromCompany must be a MERCHANT" in resp.get_json()["error"]
        assert _count_relationships(app) == 0

    def test_broker_supplier_pairing(self, app, admin_client):
        bad = admin_client.post("/api/relationships", json={
            "fromCompanyId": "m1",
            "toCompanyId": "s1",
            "relationshipType": "BROKER_SUPPLIER",
        })
        assert bad.status_code == 400
        assert "fromCompany must be a BROKER" in bad.get_json()["error"]

        ok = admin_client.post("/api/relationships", json={
            "fromCompanyId": "b1",
            "toCompanyId": "s1",
            "relationshipType": "BROKER_SUPPLIER",
        })
        assert ok.status_code == 201

    def test_partner_has_no_type_rules(self, admin_client):
        resp = admin_client.post("/api/relationships", json={
            "fromCompanyId": "s1",
            "toCompanyId": "b1",
            "relationshipType": "PARTNER",
        })
        assert resp.status_code == 201

    @pytest.mark.parametrize("body", [
        {},
        {"fromCompanyId": "m1", "toCompanyId": "s1"},
        {"fromCompanyId": "m1", "relationshipType": "PARTNER"},
        {"fromCompanyId": "", "toCompanyId": "s1", "relationshipType": "PARTNER"},
    ])
    def test_missing_fields(self, admin_client, body):
        resp = admin_client.post("/api/relationships", json=body)
        assert resp.status_code == 400
        assert "required" in resp.get_json()["error"]

    def test_non_json_body(self, admin_client):
        resp = admin_client.post("/api/relationships", data="not json", content_type="text/plain")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid JSON body"

    def test_unknown_companies(self, admin_client):
        resp = admin_client.post("/api/relationships", json={
            "fromCompanyId": "nope",
            "toCompanyId": "s1",
            "relationshipType": "PARTNER",
        })
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "From company not found"

        resp = admin_client.post("/api/relationships", json={
            "fromCompanyId": "m1",
            "toCompanyId": "nope",
            "relationshipType": "PARTNER",
        })
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "To company not found"

    def test_invalid_type(self, app, admin_client):
        resp = admin_client.post("/api/relationships", json={
            "fromCompanyId": "m1",
            "toCompanyId": "s1",
            "relationshipType": "RESELLER",
        })
        assert resp.status_code == 400
        assert "MERCHANT_SUPPLIER, BROKER_SUPPLIER, PARTNER" in resp.get_json()["error"]
        assert _count_relationships(app) == 0

    def test_type_is_matched_exactly(self, app, admin_client):
        for relationship_type in (" PARTNER ", "partner"):
            resp = admin_client.post("/api/relationships", json={
                "fromCompanyId": "s1",
                "toCompanyId": "b1",
                "relationshipType": relationship_type,
            })
            assert resp.status_code == 400
            assert resp.get_json()["error"].startswith("Invalid relationship type")
        assert _count_relationships(app) == 0

    def test_duplicate_is_rejected(self, app, admin_client):
        body = {"fromCompanyId": "m1", "toCompanyId": "s1", "relationshipType": "MERCHANT_SUPPLIER"}
        assert admin_client.post("/api/relationships", json=body).status_code == 201

        resp = admin_client.post("/api/relationships", json=body)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "This relationship already exists"
        assert _count_relationships(app) == 1

    def test_same_pair_with_other_type_is_allowed(self, app, admin_client):
        admin_client.post("/api/relationships", json={
            "fromCompanyId": "m1", "toCompanyId": "s1", "relationshipType": "MERCHANT_SUPPLIER",
        })
        resp = admin_client.post("/api/relationships", json={
            "fromCompanyId": "m1", "toCompanyId": "s1", "relationshipType": "PARTNER",
        })
        assert resp.status_code == 201
        assert _count_relationships(app) == 2


class TestListAndGet:
    def test_list_is_newest_first_with_assignment_counts(self, app, admin_client, admin_user):
        now = datetime.utcnow()
        with app.app_context():
            older = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER, created_at=now - timedelta(days=2))
            newer = make_relationship("b1", "s2", RelationshipType.BROKER_SUPPLIER, created_at=now - timedelta(days=1))
            designation_id = make_designation("s1", "Sales Rep", ["deals.view"])
            assign(admin_user, "s1", designation_id, relationship_id=older)
            assign(make_user("rep@test.com"), "s1", designation_id, relationship_id=older)

        resp = admin_client.get("/api/relationships")

        assert resp.status_code == 200
        data = resp.get_json()
        assert [r["companyRelationshipId"] for r in data] == [newer, older]
        assert data[0]["_count"]["userAssignments"] == 0
        assert data[1]["_count"]["userAssignments"] == 2
        assert data[1]["fromCompany"] == {"companyId": "m1", "companyName": "FreshThyme", "companyType": "MERCHANT"}

    def test_get_embeds_assignments(self, app, admin_client):
        with app.app_context():
            rel_id = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER)
            designation_id = make_designation("s1", "Sales Rep", ["deals.view"])
            assign(make_user("rep@test.com"), "s1", designation_id, relationship_id=rel_id)

        resp = admin_client.get(f"/api/relationships/{rel_id}")

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["fromCompany"]["companyName"] == "FreshThyme"
        assert len(data["userAssignments"]) == 1
        assignment = data["userAssignments"][0]
        assert assignment["user"]["email"] == "rep@test.com"
        assert "password_hash" not in assignment["user"]
        assert assignment["designation"]["designationName"] == "Sales Rep"

    def test_get_unknown_returns_404(self, admin_client):
        resp = admin_client.get("/api/relationships/does-not-exist")
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "Relationship not found"


class TestUpdateRelationship:
    def test_updates_status(self, app, admin_client):
        with app.app_context():
            rel_id = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER)

        resp = admin_client.put(f"/api/relationships/{rel_id}", json={"relationshipStatus": "PENDING"})

        assert resp.status_code == 200
        assert resp.get_json()["relationshipStatus"] == "PENDING"
        assert resp.get_json()["toCompany"]["companyName"] == "Coca-Cola"

    @pytest.mark.parametrize("status", ["DELETED", "active", 5, ["ACTIVE"]])
    def test_invalid_status_leaves_row_unchanged(self, app, admin_client, status):
        with app.app_context():
            rel_id = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER)

        resp = admin_client.put(f"/api/relationships/{rel_id}", json={"relationshipStatus": status})

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid status. Must be ACTIVE, INACTIVE, or PENDING"
        with app.app_context():
            assert db.session.get(CompanyRelationship, rel_id).relationship_status == "ACTIVE"

    def test_empty_body_changes_nothing(self, app, admin_client):
        with app.app_context():
            rel_id = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER)

    @pytest.mark.parametrize("status", [None, "", False])
    def test_empty_status_changes_nothing(self, app, admin_client, status):
        with app.app_context():
            rel_id = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER)

        resp = admin_client.put(f"/api/relationships/{rel_id}", json={"relationshipStatus": status})

        assert resp.status_code == 200
        assert resp.get_json()["relationshipStatus"] == "ACTIVE"

        resp = admin_client.put(f"/api/relationships/{rel_id}", json={})

        assert resp.status_code == 200
        assert resp.get_json()["relationshipStatus"] == "ACTIVE"

    def test_unknown_returns_404(self, admin_client):
        resp = admin_client.put("/api/relationships/missing", json={"relationshipStatus": "ACTIVE"})
        assert resp.status_code == 404


class TestSoftDelete:
    def test_deactivates_relationship_and_active_assignments(self, app, admin_client):
        with app.app_context():
            rel_id = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER)
            designation_id = make_designation("s1", "Sales Rep", ["deals.view"])
            for i in range(3):
                assign(make_user(f"rep{i}@test.com"), "s1", designation_id, relationship_id=rel_id)
            assign(
                make_user("old@test.com"), "s1", designation_id,
                relationship_id=rel_id, status=AssignmentStatus.INACTIVE,
            )

        resp = admin_client.delete(f"/api/relationships/{rel_id}")

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["message"] == "Relationship deactivated successfully"
        assert data["deactivatedAssignments"] == 3
        assert data["relationship"]["relationshipStatus"] == "INACTIVE"

        with app.app_context():
            rel = db.session.get(CompanyRelationship, rel_id)
            assert rel is not None
            assert rel.relationship_status == RelationshipStatus.INACTIVE
            statuses = {
                a.assignment_status
                for a in db.session.query(UserCompanyAssignment).filter_by(company_relationship_id=rel_id)
            }
            assert statuses == {AssignmentStatus.INACTIVE}

    def test_without_assignments(self, app, admin_client):
        with app.app_context():
            rel_id = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER)

        resp = admin_client.delete(f"/api/relationships/{rel_id}")

        assert resp.status_code == 200
        assert resp.get_json()["deactivatedAssignments"] == 0

    def test_unknown_returns_404(self, admin_client):
        assert admin_client.delete("/api/relationships/missing").status_code == 404

    def test_failed_commit_rolls_back_both_writes(self, app, admin_client, monkeypatch):
        with app.app_context():
            rel_id = make_relationship("m1", "s1", RelationshipType.MERCHANT_SUPPLIER)
            designation_id = make_designation("s1", "Sales Rep", ["deals.view"])
            assign(make_user("rep@test.com"), "s1", designation_id, relationship_id=rel_id)

        def boom():
            raise RuntimeError("database went away")

        monkeypatch.setattr(db.session, "commit", boom)
        resp = admin_client.delete(f"/api/relationships/{rel_id}")
        monkeypatch.undo()

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Internal server error"}
        with app.app_context():
            assert db.session.get(CompanyRelationship, rel_id).relationship_status == "ACTIVE"
            a = db.session.query(UserCompanyAssignment).filter_by(company_relationship_id=rel_id).one()
            assert a.assignment_status == "ACTIVE"


class TestRelationshipAccess:
    def test_anonymous_gets_401(self, client, companies):
        resp = client.get("/api/relationships")
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Authentication required"

    def test_missing_permission_gets_403(self, viewer_client):
        resp = viewer_client.post("/api/relationships", json={
            "fromCompanyId": "m1", "toCompanyId": "s1", "relationshipType": "MERCHANT_SUPPLIER",
        })
        assert resp.status_code == 403
