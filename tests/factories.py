"""Model factories shared by the unit tests."""

from datetime import date

from protrack.models import Activity, Client, Project, Task, User, UserRole


def make_user(user_id="USER-001", name="Alice", role=UserRole.ASSOCIATE, team=None, **extra):
    return User(
        id=user_id,
        username=name.lower(),
        name=name,
        email=f"{name.lower()}@example.com",
        role=role,
        team=team,
        **extra,
    )


def make_client(client_id="CLIENT-001", name="Acme"):
    return Client(id=client_id, name=name)


def make_project(project_id="PROJ-001", leader=None, members=(), client=None, **extra):
    leader = leader or make_user()
    client = client or make_client()
    fields = dict(
        id=project_id,
        name=f"Project {project_id}",
        client_id=client.id,
        client_name=client.name,
        team_leader_id=leader.id,
        team_leader=leader.name,
        team_member_ids=[m.id for m in members],
        team_members=list(members),
        start_date=date(2026, 1, 1),
        deadline=date(2026, 12, 31),
    )
    fields.update(extra)
    return Project(**fields)


def make_task(task_id="TASK-0001", project_id="PROJ-001", user=None, **extra):
    fields = dict(
        id=task_id,
        name=f"Task {task_id}",
        project_id=project_id,
        user_id=user.id if user else None,
        user_name=user.name if user else None,
        user_avatar=user.avatar if user else None,
    )
    fields.update(extra)
    return Task(**fields)


def make_activity(activity_id="ACT-0001", task=None, user=None, day=date(2026, 3, 1), **extra):
    task = task or make_task()
    user = user or make_user()
    fields = dict(
        id=activity_id,
        activity=f"Work on {task.name}",
        task_id=task.id,
        task_name=task.name,
        project_id=task.project_id,
        user_id=user.id,
        user_name=user.name,
        user_avatar=user.avatar,
        date=day,
        start_time="09:00",
        end_time="10:30",
    )
    fields.update(extra)
    return Activity(**fields)
