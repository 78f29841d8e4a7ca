"""Integration tests for /admin/enrollments endpoints (app/routers/admin_enrollments.py)"""
import pytest

from app.models.enrollment import EnrollmentSource


@pytest.fixture
def catalog_and_buyer(admin_with_stores):
    client, mock_db, admin, stores = admin_with_stores
    course = stores.catalog.create_course(title="Master", hotmart_id="12345")
    user = stores.identity.create_account("buyer@test.com", "Ana")
    return client, mock_db, stores, course, user


class TestGrantEnrollment:
    def test_grant_creates_manual_enrollment(self, catalog_and_buyer):
        client, mock_db, stores, course, user = catalog_and_buyer

        response = client.post("/admin/enrollments", json={"user_id": user.id, "course_id": course.id})

        assert response.status_code == 201
        assert stores.db.enrollments[(user.id, course.id)] == EnrollmentSource.MANUAL
        mock_db.commit.assert_called_once()

    def test_grant_is_idempotent(self, catalog_and_buyer):
        client, mock_db, stores, course, user = catalog_and_buyer
        stores.entitlements.upsert(user.id, course.id)

        response = client.post("/admin/enrollments", json={"user_id": user.id, "course_id": course.id})

        assert response.status_code == 201
        assert len(stores.db.enrollments) == 1
        assert stores.db.enrollments[(user.id, course.id)] == EnrollmentSource.PURCHASE

    def test_unknown_user_returns_404(self, catalog_and_buyer):
        client, mock_db, stores, course, user = catalog_and_buyer

        response = client.post("/admin/enrollments", json={"user_id": 999, "course_id": course.id})

        assert response.status_code == 404
        assert stores.db.enrollments == {}

    def test_unknown_course_returns_404(self, catalog_and_buyer):
        client, mock_db, stores, course, user = catalog_and_buyer

        response = client.post("/admin/enrollments", json={"user_id": user.id, "course_id": 999})

        assert response.status_code == 404

    def test_store_failure_returns_500(self, catalog_and_buyer):
        client, mock_db, stores, course, user = catalog_and_buyer
        stores.entitlements.fail_upsert = True

        response = client.post("/admin/enrollments", json={"user_id": user.id, "course_id": course.id})

        assert response.status_code == 500
        mock_db.rollback.assert_called_once()

    def test_student_cannot_grant(self, client_with_student):
        client, mock_db, student = client_with_student

        response = client.post("/admin/enrollments", json={"user_id": 1, "course_id": 1})

        assert response.status_code == 403
