"""
Tests for the admin checklist and GET /api/setup/admin_checklist.
"""

from ignition.core import checklist, integrations
from ignition.models import db, Card, Database, Table


def summarize(groups):
    return [
        {
            "name": group["name"],
            "tasks": [
                {k: task[k] for k in ("title", "completed", "triggered", "is_next_step")}
                for task in group["tasks"]
            ],
        }
        for group in groups
    ]


def task(title, completed, triggered, is_next_step=False):
    return {
        "title": title,
        "completed": completed,
        "triggered": triggered,
        "is_next_step": is_next_step,
    }


class TestAdminChecklistAccess:
    """Access control for the checklist endpoint."""

    def test_requires_session(self, client):
        response = client.get("/api/setup/admin_checklist")

        assert response.status_code == 401
        assert response.get_json() == {"message": "Unauthenticated"}

    def test_requires_superuser(self, client, user_headers):
        response = client.get("/api/setup/admin_checklist", headers=user_headers)

        assert response.status_code == 403
        assert response.get_json() == {"message": "You don't have permissions to do that."}

    def test_unknown_session(self, client, admin_user):
        response = client.get(
            "/api/setup/admin_checklist", headers={"X-Ignition-Session": "not-a-session"}
        )

        assert response.status_code == 401


class TestAdminChecklist:
    """Tests for the checklist contents."""

    def test_checklist_with_patched_state(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(checklist, "exists", lambda *args: True)
        monkeypatch.setattr(checklist, "count", lambda model: 5)
        monkeypatch.setattr(integrations, "email_configured", lambda: True)
        monkeypatch.setattr(integrations, "slack_configured", lambda: False)

        response = client.get("/api/setup/admin_checklist", headers=admin_headers)

        assert response.status_code == 200
        assert summarize(response.get_json()) == [
            {
                "name": "Get connected",
                "tasks": [
                    task("Add a database", True, True),
                    task("Set up email", True, True),
                    task("Set Slack credentials", False, True, is_next_step=True),
                    task("Invite team members", True, True),
                ],
            },
            {
                "name": "Curate your data",
                "tasks": [
                    task("Hide irrelevant tables", True, False),
                    task("Organize questions", True, False),
                    task("Create metrics", True, False),
                    task("Create segments", True, False),
                ],
            },
        ]

    def test_fresh_instance(self, client, admin_headers):
        """With only the admin, adding a database is the next step."""
        response = client.get("/api/setup/admin_checklist", headers=admin_headers)

        groups = response.get_json()
        tasks = [t for g in groups for t in g["tasks"]]
        assert [t["title"] for t in tasks if t["is_next_step"]] == ["Add a database"]
        assert all(t["group"] == g["name"] for g in groups for t in g["tasks"])
        assert tasks[0]["link"] == "/admin/databases/create"

    def test_counts_from_database(self, app, client, admin_headers):
        with app.app_context():
            database = Database(name="Warehouse", engine="h2", details={"db": "file:/tmp/w"})
            db.session.add(database)
            db.session.flush()
            for i in range(20):
                db.session.add(Table(db_id=database.id, name=f"table_{i}"))
            for i in range(5):
                db.session.add(Card(name=f"card_{i}"))
            db.session.commit()

        groups = client.get("/api/setup/admin_checklist", headers=admin_headers).get_json()
        tasks = {t["title"]: t for g in groups for t in g["tasks"]}

        assert tasks["Add a database"]["completed"] is True
        assert tasks["Invite team members"]["triggered"] is True
        assert tasks["Invite team members"]["completed"] is False
        assert tasks["Hide irrelevant tables"]["triggered"] is True
        assert tasks["Organize questions"]["triggered"] is False
        # email and slack are not configured
        assert tasks["Set up email"]["is_next_step"] is True

    def test_sample_database_does_not_count(self, app):
        with app.app_context():
            db.session.add(Database(name="Sample", engine="h2", is_sample=True, details={}))
            db.session.commit()

            assert checklist.checklist_values()["has_dbs"] is False


class TestBuildChecklist:
    """build_checklist is a pure function of the gathered values."""

    VALUES = {
        "has_dbs": True,
        "has_dashboards": False,
        "has_pulses": False,
        "has_questions": True,
        "has_collections": False,
        "has_metrics": False,
        "has_segments": False,
        "has_hidden_tables": False,
        "num_tables": 3,
        "num_cards": 30,
        "num_users": 4,
        "has_email_configured": True,
        "has_slack_configured": True,
    }

    def test_deterministic(self):
        assert checklist.build_checklist(dict(self.VALUES)) == checklist.build_checklist(
            dict(self.VALUES)
        )

    def test_next_step_is_first_open_task(self):
        groups = checklist.build_checklist(dict(self.VALUES))
        next_steps = [t["title"] for g in groups for t in g["tasks"] if t["is_next_step"]]

        assert next_steps == ["Organize questions"]

    def test_no_next_step_when_everything_done(self):
        values = {k: (True if isinstance(v, bool) else v) for k, v in self.VALUES.items()}
        groups = checklist.build_checklist(values)

        assert not any(t["is_next_step"] for g in groups for t in g["tasks"])
