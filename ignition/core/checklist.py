"""
Admin checklist.

The checklist is a read-only summary of onboarding progress. checklist_values()
gathers what it needs from the database and settings; build_checklist() turns
those values into ordered task groups and has no other inputs.
"""

from typing import Any, Dict, List, Optional

from ignition.models import (
    db,
    Card,
    Collection,
    Dashboard,
    Database,
    Metric,
    Pulse,
    Segment,
    Table,
    User,
)
from . import integrations

# Checklist triggers: how much content a team needs before a task is worth doing
INVITE_TRIGGER_CARDS = 5
HIDE_TABLES_TRIGGER_TABLES = 20
CURATE_TRIGGER_CARDS = 30


def exists(model, *criteria) -> bool:
    """True if at least one row of model matches criteria."""
    query = db.session.query(model.id)
    if criteria:
        query = query.filter(*criteria)
    return query.first() is not None


def count(model) -> int:
    return db.session.query(model).count()


def checklist_values() -> Dict[str, Any]:
    """Gather the current state the checklist is computed from."""
    return {
        "has_dbs": exists(Database, Database.is_sample.is_(False)),
        "has_dashboards": exists(Dashboard),
        "has_pulses": exists(Pulse),
        "has_questions": exists(Card),
        "has_collections": exists(Collection),
        "has_metrics": exists(Metric),
        "has_segments": exists(Segment),
        "has_hidden_tables": exists(Table, Table.visibility_type.isnot(None)),
        "num_tables": count(Table),
        "num_cards": count(Card),
        "num_users": count(User),
        "has_email_configured": integrations.email_configured(),
        "has_slack_configured": integrations.slack_configured(),
    }


def _task(group: str, title: str, description: str, link: str, completed: bool, triggered: bool) -> Dict[str, Any]:
    return {
        "title": title,
        "group": group,
        "description": description,
        "link": link,
        "completed": bool(completed),
        "triggered": bool(triggered),
        "is_next_step": False,
    }


def _get_connected_tasks(v: Dict[str, Any]) -> List[Dict[str, Any]]:
    group = "Get connected"
    return [
        _task(
            group,
            "Add a database",
            "Connect to your data so your whole team can start to explore.",
            "/admin/databases/create",
            completed=v["has_dbs"],
            triggered=True,
        ),
        _task(
            group,
            "Set up email",
            "Add email credentials so you can more easily invite team members and get updates via Pulses.",
            "/admin/settings/email",
            completed=v["has_email_configured"],
            triggered=True,
        ),
        _task(
            group,
            "Set Slack credentials",
            "Does your team use Slack? If so, you can send automated updates via pulses.",
            "/admin/settings/slack",
            completed=v["has_slack_configured"],
            triggered=True,
        ),
        _task(
            group,
            "Invite team members",
            "Share answers and data with the rest of your team.",
            "/admin/people/",
            completed=v["num_users"] > 1,
            triggered=(
                v["has_dashboards"]
                or v["has_pulses"]
                or v["num_cards"] >= INVITE_TRIGGER_CARDS
            ),
        ),
    ]


def _curate_data_tasks(v: Dict[str, Any]) -> List[Dict[str, Any]]:
    group = "Curate your data"
    many_cards = v["num_cards"] >= CURATE_TRIGGER_CARDS
    return [
        _task(
            group,
            "Hide irrelevant tables",
            "If your data contains technical or irrelevant info you can hide it.",
            "/admin/datamodel/database",
            completed=v["has_hidden_tables"],
            triggered=v["num_tables"] >= HIDE_TABLES_TRIGGER_TABLES,
        ),
        _task(
            group,
            "Organize questions",
            "Have a lot of saved questions? Create collections to help manage them and add context.",
            "/collection/root",
            completed=v["has_collections"],
            triggered=many_cards,
        ),
        _task(
            group,
            "Create metrics",
            "Define canonical metrics to make it easier for the rest of your team to get the right answers.",
            "/admin/datamodel/database",
            completed=v["has_metrics"],
            triggered=many_cards,
        ),
        _task(
            group,
            "Create segments",
            "Keep everyone on the same page by creating canonical sets of filters anyone can use while asking questions.",
            "/admin/datamodel/database",
            completed=v["has_segments"],
            triggered=many_cards,
        ),
    ]


def mark_next_step(groups: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flag the first triggered, uncompleted task as the next step."""
    for group in groups:
        for task in group["tasks"]:
            if task["triggered"] and not task["completed"]:
                task["is_next_step"] = True
                return groups
    return groups


def build_checklist(values: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Compute the checklist groups from gathered values."""
    groups = [
        {"name": "Get connected", "tasks": _get_connected_tasks(values)},
        {"name": "Curate your data", "tasks": _curate_data_tasks(values)},
    ]
    return mark_next_step(groups)


def admin_checklist(values: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """The checklist for the current state, or for values when given."""
    return build_checklist(checklist_values() if values is None else values)
