"""Integration tests for /progress endpoints (app/routers/progress.py)"""
import pytest
from unittest.mock import patch


@pytest.fixture
def enrolled(student_with_stores):
    client, mock_db, student, stores = student_with_stores
    catalog = stores.catalog
    course = catalog.create_course(title="Master", hotmart_id="12345")
    module = catalog.create_module(course, title="M1")
    lessons = [catalog.create_lesson(module, title=f"L{i}") for i in range(1, 3)]
    stores.entitlements.upsert(student.id, course.id)
    return client, mock_db, student, stores, lessons


class TestGetProgress:
    def test_stats_and_rank(self, enrolled):
        client, mock_db, student, stores, lessons = enrolled

        with patch("app.routers.progress.progress_service") as mock_service:
            mock_service.completed_lesson_ids.return_value = [lessons[0].id]
            response = client.get("/progress")

        assert response.status_code == 200
        data = response.json()
        assert data["completed_lesson_ids"] == [lessons[0].id]
        assert data["stats"] == {
            "total_lessons": 2,
            "total_completed": 1,
            "percentage": 50,
            "rank": "Creador",
        }
        assert data["resume_lesson_id"] == lessons[1].id

    def test_resume_falls_back_to_first_lesson_when_all_complete(self, enrolled):
        client, mock_db, student, stores, lessons = enrolled

        with patch("app.routers.progress.progress_service") as mock_service:
            mock_service.completed_lesson_ids.return_value = [l.id for l in lessons]
            response = client.get("/progress")

        assert response.status_code == 200
        data = response.json()
        assert data["resume_lesson_id"] == lessons[0].id
        assert data["stats"]["rank"] == "Maestro"

    def test_no_enrollments_has_nothing_to_resume(self, enrolled):
        client, mock_db, student, stores, lessons = enrolled
        stores.db.enrollments.clear()

        with patch("app.routers.progress.progress_service") as mock_service:
            mock_service.completed_lesson_ids.return_value = []
            response = client.get("/progress")

        assert response.status_code == 200
        assert response.json()["resume_lesson_id"] is None


class TestCompletion:
    def test_mark_complete(self, enrolled):
        client, mock_db, student, stores, lessons = enrolled

        with patch("app.routers.progress.progress_service") as mock_service:
            response = client.put(f"/progress/lessons/{lessons[0].id}")

        assert response.status_code == 204
        mock_service.mark_complete.assert_called_once_with(mock_db, student.id, lessons[0].id)
        mock_db.commit.assert_called_once()

    def test_mark_complete_not_enrolled_returns_403(self, enrolled):
        client, mock_db, student, stores, lessons = enrolled
        stores.db.enrollments.clear()

        with patch("app.routers.progress.progress_service") as mock_service:
            response = client.put(f"/progress/lessons/{lessons[0].id}")

        assert response.status_code == 403
        mock_service.mark_complete.assert_not_called()

    def test_mark_complete_missing_lesson_returns_404(self, enrolled):
        client, mock_db, student, stores, lessons = enrolled

        response = client.put("/progress/lessons/999")

        assert response.status_code == 404

    def test_unmark_complete(self, enrolled):
        client, mock_db, student, stores, lessons = enrolled

        with patch("app.routers.progress.progress_service") as mock_service:
            response = client.delete(f"/progress/lessons/{lessons[0].id}")

        assert response.status_code == 204
        mock_service.unmark_complete.assert_called_once_with(mock_db, student.id, lessons[0].id)


class TestRating:
    def test_rate_lesson(self, enrolled):
        client, mock_db, student, stores, lessons = enrolled

        with patch("app.routers.progress.progress_service") as mock_service:
            response = client.put(f"/progress/lessons/{lessons[0].id}/rating", json={"rating": 4})

        assert response.status_code == 200
        assert response.json() == {"lesson_id": lessons[0].id, "rating": 4}
        mock_service.set_rating.assert_called_once_with(mock_db, student.id, lessons[0].id, 4)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range_returns_422(self, enrolled, rating):
        client, mock_db, student, stores, lessons = enrolled

        response = client.put(f"/progress/lessons/{lessons[0].id}/rating", json={"rating": rating})

        assert response.status_code == 422

    def test_unrated_lesson_reads_zero(self, enrolled):
        client, mock_db, student, stores, lessons = enrolled

        response = client.get(f"/progress/lessons/{lessons[0].id}/rating")

        assert response.status_code == 200
        assert response.json()["rating"] == 0
