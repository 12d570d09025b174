import json
import pytest
from datetime import datetime, timedelta, timezone

from tracker_backend.api.exceptions import BadRequestException, ForbiddenException, NotFoundException
from tracker_backend.interface.projects import ProjectCreate
from tracker_backend.interface.tasks import TaskCreate, TaskUpdate
from tracker_backend.services.project_service import ProjectService
from tracker_backend.services.task_service import TaskService

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def setup(db, hub, make_user):
    owner, member, stranger = make_user("owner"), make_user("member"), make_user("stranger")
    projects = ProjectService(db)
    project = projects.create(ProjectCreate(name="Demo", key="DEMO"), owner.id)
    projects.add_member(project.id, owner.id, member.email)
    return {
        "service": TaskService(db, hub),
        "project": project,
        "owner": owner,
        "member": member,
        "stranger": stranger,
    }


@pytest.fixture
def events(hub):
    subscription = hub.subscribe()

    def _drain():
        messages = []
        while (message := subscription.receive_nowait()) is not None:
            messages.append(json.loads(message))
        return messages

    return _drain


class TestTaskCreate:

    def test_defaults_and_created_event(self, setup, events):
        s = setup
        task = s["service"].create(s["project"].id, s["member"].id, TaskCreate(title="First task"))

        assert task.status == "ToDo"
        assert task.priority == "Medium"
        assert task.has_due_date is False
        assert task.reporter_id == s["member"].id

        published = events()
        assert len(published) == 1
        assert published[0]["event_type"] == "TASK_CREATED"
        assert published[0]["task"]["id"] == task.id

    def test_stranger_denied_without_event(self, setup, events):
        s = setup
        with pytest.raises(ForbiddenException) as exc_info:
            s["service"].create(s["project"].id, s["stranger"].id, TaskCreate(title="Sneaky"))
        assert exc_info.value.detail["reason"] == "NotMember"
        assert events() == []

    def test_unknown_project_is_not_found(self, setup):
        s = setup
        with pytest.raises(NotFoundException):
            s["service"].create("missing", s["owner"].id, TaskCreate(title="Orphan"))

    def test_due_date_flag_requires_end_date(self, setup):
        s = setup
        with pytest.raises(BadRequestException):
            s["service"].create(s["project"].id, s["owner"].id, TaskCreate(title="Due", has_due_date=True))

        assert s["service"].list_for_project(s["project"].id, s["owner"].id) == []

    def test_end_date_without_flag_rejected(self, setup):
        s = setup
        with pytest.raises(BadRequestException):
            s["service"].create(s["project"].id, s["owner"].id, TaskCreate(title="Due", end_date=NOW))

    def test_start_must_precede_end(self, setup):
        s = setup
        with pytest.raises(BadRequestException):
            s["service"].create(s["project"].id, s["owner"].id, TaskCreate(
                title="Backwards", has_due_date=True, start_date=NOW, end_date=NOW
            ))

    def test_malformed_assignee_rejected(self, setup):
        s = setup
        with pytest.raises(BadRequestException):
            s["service"].create(s["project"].id, s["owner"].id, TaskCreate(title="Assigned", assignee_id="nope"))

    def test_with_due_date_and_assignee(self, setup):
        s = setup
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(
            title="Scheduled",
            has_due_date=True,
            start_date=NOW,
            end_date=NOW + timedelta(days=3),
            assignee_id=s["member"].id,
            priority="Urgent",
        ))
        assert task.end_date == NOW + timedelta(days=3)
        assert task.assignee_id == s["member"].id
        assert task.priority == "Urgent"


class TestTaskUpdate:

    def test_status_change_event(self, setup, events):
        s = setup
        task = s["service"].create(s["project"].id, s["member"].id, TaskCreate(title="Ship it"))
        events()

        updated = s["service"].update(task.id, s["owner"].id, TaskUpdate(status="Done"))
        assert updated.status == "Done"

        (event,) = events()
        assert event["event_type"] == "TASK_UPDATED"
        assert event["task"]["status"] == "Done"
        assert event["changes"]["status_changed"] is True
        assert event["changes"]["previous_status"] == "ToDo"
        assert event["changes"]["updated_fields"]["status"] is True
        assert event["changes"]["updated_fields"]["title"] is False

    def test_supplied_status_counts_as_change_even_when_equal(self, setup, events):
        s = setup
        task = s["service"].create(s["project"].id, s["member"].id, TaskCreate(title="Steady"))
        events()

        s["service"].update(task.id, s["owner"].id, TaskUpdate(status="ToDo"))
        (event,) = events()
        assert event["changes"]["status_changed"] is True
        assert event["changes"]["previous_status"] == "ToDo"

    def test_fields_without_status_have_no_previous_status(self, setup, events):
        s = setup
        task = s["service"].create(s["project"].id, s["member"].id, TaskCreate(title="Rename me"))
        events()

        s["service"].update(task.id, s["member"].id, TaskUpdate(title="Renamed", priority="High"))
        (event,) = events()
        assert event["changes"]["previous_status"] is None
        assert event["changes"]["status_changed"] is False
        assert event["changes"]["updated_fields"]["title"] is True
        assert event["changes"]["updated_fields"]["priority"] is True

    def test_empty_patch_returns_task_without_event(self, setup, events):
        s = setup
        task = s["service"].create(s["project"].id, s["member"].id, TaskCreate(title="Untouched"))
        events()

        result = s["service"].update(task.id, s["member"].id, TaskUpdate())
        assert result.title == "Untouched"
        assert result.updated_at == task.updated_at
        assert events() == []

    def test_three_state_assignee(self, setup):
        s = setup
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(
            title="Assigned", assignee_id=s["member"].id, description="keep me"
        ))

        # Absent leaves the value alone
        kept = s["service"].update(task.id, s["owner"].id, TaskUpdate(title="Still assigned"))
        assert kept.assignee_id == s["member"].id
        assert kept.description == "keep me"

        # Explicit null clears it
        cleared = s["service"].update(task.id, s["owner"].id, TaskUpdate.model_validate({"assignee_id": None}))
        assert cleared.assignee_id is None

    def test_null_rejected_for_required_fields(self):
        for field in ("title", "status", "priority", "has_due_date"):
            with pytest.raises(ValueError):
                TaskUpdate.model_validate({field: None})

    def test_merged_due_date_validation(self, setup, events):
        s = setup
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(
            title="Due soon", has_due_date=True, end_date=NOW
        ))
        events()

        # Clearing the end date while the flag stays set is invalid
        with pytest.raises(BadRequestException):
            s["service"].update(task.id, s["owner"].id, TaskUpdate.model_validate({"end_date": None}))

        # Dropping the flag while the stored end date remains is invalid
        with pytest.raises(BadRequestException):
            s["service"].update(task.id, s["owner"].id, TaskUpdate(has_due_date=False))

        # A start after the stored end is invalid
        with pytest.raises(BadRequestException):
            s["service"].update(task.id, s["owner"].id, TaskUpdate(start_date=NOW + timedelta(hours=1)))

        updated = s["service"].update(task.id, s["owner"].id, TaskUpdate.model_validate({
            "has_due_date": False, "end_date": None
        }))
        assert updated.has_due_date is False
        assert updated.end_date is None
        assert len(events()) == 1

    def test_due_flag_without_end_rejected_on_update(self, setup):
        s = setup
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(title="No due"))
        with pytest.raises(BadRequestException):
            s["service"].update(task.id, s["owner"].id, TaskUpdate(has_due_date=True))

    def test_stranger_cannot_update(self, setup):
        s = setup
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(title="Private"))
        with pytest.raises(ForbiddenException):
            s["service"].update(task.id, s["stranger"].id, TaskUpdate(title="Mine now"))

    def test_missing_task_is_not_found(self, setup):
        s = setup
        with pytest.raises(NotFoundException):
            s["service"].update("missing", s["owner"].id, TaskUpdate(title="Ghost"))


class TestTaskDelete:

    def test_member_can_update_but_not_delete(self, setup, events):
        s = setup
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(title="Shared work"))
        events()

        s["service"].update(task.id, s["member"].id, TaskUpdate(description="progress"))
        with pytest.raises(ForbiddenException) as exc_info:
            s["service"].delete(task.id, s["member"].id)
        assert exc_info.value.detail["reason"] == "NotOwner"

        assert [e["event_type"] for e in events()] == ["TASK_UPDATED"]
        assert s["service"].get(task.id, s["owner"].id).id == task.id

    def test_assignee_can_delete(self, setup, events):
        s = setup
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(
            title="Assigned work", assignee_id=s["member"].id
        ))
        events()

        s["service"].delete(task.id, s["member"].id)
        (event,) = events()
        assert event == {"event_type": "TASK_DELETED", "task_id": task.id, "project_id": s["project"].id}

        with pytest.raises(NotFoundException):
            s["service"].get(task.id, s["owner"].id)

    def test_owner_can_delete(self, setup):
        s = setup
        task = s["service"].create(s["project"].id, s["member"].id, TaskCreate(title="Owner cleanup"))
        s["service"].delete(task.id, s["owner"].id)
        assert s["service"].list_for_project(s["project"].id, s["owner"].id) == []


class TestTaskRead:

    def test_get_and_list_require_access(self, setup):
        s = setup
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(title="Readable"))

        assert s["service"].get(task.id, s["member"].id).title == "Readable"
        assert [t.id for t in s["service"].list_for_project(s["project"].id, s["member"].id)] == [task.id]

        with pytest.raises(ForbiddenException):
            s["service"].get(task.id, s["stranger"].id)
        with pytest.raises(ForbiddenException):
            s["service"].list_for_project(s["project"].id, s["stranger"].id)

    def test_full_view_without_date_range(self, setup):
        s = setup
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(title="Full view"))
        full = s["service"].get_full(task.id, s["member"].id)
        assert full.task.id == task.id
        assert full.date_range is None

    def test_publish_failure_does_not_fail_mutation(self, setup, hub, monkeypatch):
        s = setup

        def broken_publish(message):
            raise RuntimeError("hub down")

        monkeypatch.setattr(hub, "publish", broken_publish)
        task = s["service"].create(s["project"].id, s["owner"].id, TaskCreate(title="Resilient"))
        assert s["service"].get(task.id, s["owner"].id).title == "Resilient"
