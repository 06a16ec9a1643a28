"""API tests for /api/projects."""
from datetime import date

from app.domain.models.project import ProjectStatus
from app.domain.models.user import Role

from conftest import auth_headers, make_project, make_user


def error_code(response):
    return response.json()["error"]["code"]


class TestCreateAndRead:
    def test_candidate_creates_project(self, client, candidate, other_candidate):
        response = client.post(
            "/api/projects",
            json={
                "title": "Détection d'intrusions",
                "description": "Étude des IDS",
                "budget": 150000,
                "member_ids": [other_candidate.id],
                "external_participants": "Dr. Smith (external)",
            },
            headers=auth_headers(candidate),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["owner"]["email"] == "ana@x.com"
        assert body["domain"] == "Non spécifié"
        assert body["status"] == "EN_COURS"
        assert body["progress"] == 0
        assert body["version"] == 1
        assert body["participants_list"] == "Omar Sy (omar@x.com)\n\n--- Externes ---\nDr. Smith (external)"

    def test_unknown_member_is_not_found(self, client, candidate):
        response = client.post(
            "/api/projects",
            json={"title": "X", "member_ids": ["does-not-exist"]},
            headers=auth_headers(candidate),
        )
        assert response.status_code == 404

    def test_end_before_start_is_rejected(self, client, candidate):
        response = client.post(
            "/api/projects",
            json={"title": "X", "start_date": "2026-05-01", "end_date": "2026-04-01"},
            headers=auth_headers(candidate),
        )
        assert response.status_code == 422
        assert error_code(response) == "ValidationFailedException"

    def test_candidate_lists_only_own_projects(self, client, db_session, candidate, other_candidate):
        make_project(db_session, candidate, title="Mine")
        make_project(db_session, other_candidate, title="Theirs")

        response = client.get("/api/projects", headers=auth_headers(candidate))
        assert [p["title"] for p in response.json()] == ["Mine"]

    def test_manager_lists_and_searches_everything(self, client, db_session, manager, candidate, other_candidate):
        make_project(db_session, candidate, title="Réseaux 5G", domain="Télécoms")
        make_project(db_session, other_candidate, title="Vision", domain="IA")

        response = client.get("/api/projects", headers=auth_headers(manager))
        assert len(response.json()) == 2

        response = client.get("/api/projects", params={"keyword": "ia"}, headers=auth_headers(manager))
        assert [p["title"] for p in response.json()] == ["Vision"]

    def test_foreign_project_is_forbidden_missing_is_not_found(self, client, db_session, candidate, other_candidate):
        foreign = make_project(db_session, other_candidate)

        response = client.get(f"/api/projects/{foreign.id}", headers=auth_headers(candidate))
        assert response.status_code == 403

        response = client.get("/api/projects/9999", headers=auth_headers(candidate))
        assert response.status_code == 404
        assert error_code(response) == "EntityNotFoundException"

    def test_overdue_flag(self, client, db_session, candidate):
        project = make_project(db_session, candidate, end_date=date(2000, 1, 1))
        response = client.get(f"/api/projects/{project.id}", headers=auth_headers(candidate))
        assert response.json()["overdue"] is True
        assert response.json()["short_summary"] == "Aucune description"

    def test_incomplete_profile_is_blocked(self, client, db_session):
        newcomer = make_user(db_session, "new@x.com", Role.CANDIDATE)
        response = client.post("/api/projects", json={"title": "X"}, headers=auth_headers(newcomer))
        assert response.status_code == 403
        assert error_code(response) == "ProfileIncompleteException"


class TestUpdate:
    def test_partial_update_keeps_other_fields(self, client, db_session, candidate):
        project = make_project(db_session, candidate, title="Avant", domain="IA", budget=10.0)

        response = client.put(
            f"/api/projects/{project.id}",
            json={"progress": 55},
            headers=auth_headers(candidate),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["progress"] == 55
        assert body["title"] == "Avant"
        assert body["domain"] == "IA"
        assert body["budget"] == 10.0
        assert body["version"] == 2

    def test_owner_cannot_update_finished_project(self, client, db_session, candidate):
        project = make_project(db_session, candidate, status=ProjectStatus.TERMINE)
        response = client.put(
            f"/api/projects/{project.id}", json={"progress": 10}, headers=auth_headers(candidate)
        )
        assert response.status_code == 403
        assert "terminé" in response.json()["error"]["message"]

    def test_manager_can_update_finished_project(self, client, db_session, manager, candidate):
        project = make_project(db_session, candidate, status=ProjectStatus.TERMINE)
        response = client.put(
            f"/api/projects/{project.id}",
            json={"status": "EN_COURS"},
            headers=auth_headers(manager),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "EN_COURS"
        assert response.json()["is_modifiable"] is True

    def test_null_status_is_rejected(self, client, db_session, manager, candidate):
        project = make_project(db_session, candidate)
        response = client.put(
            f"/api/projects/{project.id}", json={"status": None}, headers=auth_headers(manager)
        )
        assert response.status_code == 422
        db_session.refresh(project)
        assert project.status == ProjectStatus.EN_COURS
        assert project.version == 1

    def test_null_title_is_rejected(self, client, db_session, candidate):
        project = make_project(db_session, candidate, title="Avant")
        response = client.put(
            f"/api/projects/{project.id}", json={"title": None}, headers=auth_headers(candidate)
        )
        assert response.status_code == 422
        db_session.refresh(project)
        assert project.title == "Avant"

    def test_null_progress_clears_the_value(self, client, db_session, candidate):
        project = make_project(db_session, candidate, progress=30)
        response = client.put(
            f"/api/projects/{project.id}", json={"progress": None}, headers=auth_headers(candidate)
        )
        assert response.status_code == 200
        assert response.json()["progress"] is None

    def test_stale_version_conflicts(self, client, db_session, manager, candidate):
        project = make_project(db_session, candidate)

        first = client.put(
            f"/api/projects/{project.id}", json={"title": "A", "version": 1}, headers=auth_headers(manager)
        )
        assert first.status_code == 200

        second = client.put(
            f"/api/projects/{project.id}", json={"title": "B", "version": 1}, headers=auth_headers(candidate)
        )
        assert second.status_code == 409
        assert second.json()["error"]["details"]["current_version"] == 2

    def test_member_ids_replace_members(self, client, db_session, candidate, other_candidate, manager):
        project = make_project(db_session, candidate)
        response = client.put(
            f"/api/projects/{project.id}",
            json={"member_ids": [other_candidate.id, manager.id]},
            headers=auth_headers(candidate),
        )
        assert [m["email"] for m in response.json()["members"]] == ["manager@esmt.sn", "omar@x.com"]
        assert response.json()["participants_list"] == (
            "Moussa Fall (manager@esmt.sn)\nOmar Sy (omar@x.com)"
        )


class TestDelete:
    def test_owner_deletes(self, client, db_session, candidate):
        project = make_project(db_session, candidate)
        response = client.delete(f"/api/projects/{project.id}", headers=auth_headers(candidate))
        assert response.status_code == 204
        assert client.get(f"/api/projects/{project.id}", headers=auth_headers(candidate)).status_code == 404

    def test_other_candidate_cannot_delete(self, client, db_session, candidate, other_candidate):
        project = make_project(db_session, candidate)
        response = client.delete(f"/api/projects/{project.id}", headers=auth_headers(other_candidate))
        assert response.status_code == 403


class TestParticipants:
    def test_add_and_remove_members(self, client, db_session, manager, candidate, other_candidate):
        project = make_project(db_session, candidate, external_participants="Dr. Smith")
        headers = auth_headers(manager)

        response = client.post(
            f"/api/projects/{project.id}/members",
            json={"user_ids": [other_candidate.id, other_candidate.id]},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["participants_list"] == "Omar Sy (omar@x.com)\n\n--- Externes ---\nDr. Smith"

        response = client.delete(f"/api/projects/{project.id}/members/{other_candidate.id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["members"] == []
        assert response.json()["participants_list"] == "Dr. Smith"

    def test_removing_non_member_is_not_found(self, client, db_session, manager, candidate):
        project = make_project(db_session, candidate)
        response = client.delete(f"/api/projects/{project.id}/members/{candidate.id}", headers=auth_headers(manager))
        assert response.status_code == 404

    def test_set_external_participants(self, client, db_session, manager, candidate):
        project = make_project(db_session, candidate)
        response = client.put(
            f"/api/projects/{project.id}/external-participants",
            json={"external_participants": "Pr. Diallo (UCAD)"},
            headers=auth_headers(manager),
        )
        assert response.json()["participants_list"] == "Pr. Diallo (UCAD)"

    def test_candidate_cannot_manage_members(self, client, db_session, candidate):
        project = make_project(db_session, candidate)
        response = client.post(
            f"/api/projects/{project.id}/members", json={"user_ids": []}, headers=auth_headers(candidate)
        )
        assert response.status_code == 403


class TestStaffViews:
    def test_by_status(self, client, db_session, manager, candidate):
        make_project(db_session, candidate, title="Fini", status=ProjectStatus.TERMINE)
        make_project(db_session, candidate, title="Actif")

        response = client.get("/api/projects/status/termine", headers=auth_headers(manager))
        assert [p["title"] for p in response.json()] == ["Fini"]

    def test_by_unknown_status(self, client, manager):
        response = client.get("/api/projects/status/ARCHIVE", headers=auth_headers(manager))
        assert response.status_code == 422

    def test_dashboard_is_staff_only(self, client, db_session, manager, candidate):
        make_project(db_session, candidate)
        response = client.get("/api/projects/dashboard", headers=auth_headers(manager))
        assert response.status_code == 200
        assert response.json()["stats"]["total_projects"] == 1
        assert len(response.json()["recent_projects"]) == 1

        assert client.get("/api/projects/dashboard", headers=auth_headers(candidate)).status_code == 403

    def test_export_pdf(self, client, db_session, candidate):
        project = make_project(db_session, candidate, description="Une <b>description</b> & plus")
        response = client.get(f"/api/projects/{project.id}/export-pdf", headers=auth_headers(candidate))
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")


class TestMaintenance:
    def test_non_admin_gets_503(self, client, db_session, app_config, candidate, admin):
        app_config.maintenance_mode = True
        db_session.commit()

        response = client.get("/api/projects", headers=auth_headers(candidate))
        assert response.status_code == 503
        assert error_code(response) == "MaintenanceModeException"

        assert client.get("/api/projects", headers=auth_headers(admin)).status_code == 200
