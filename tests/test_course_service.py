from datetime import date

import pytest

from campusfin.models.task import Task
from campusfin.models.user import User
from campusfin.schemas.course import CourseCreate, CourseUpdate
from campusfin.schemas.finance import SavingsCategoryCreate, SavingsCategoryUpdate
from campusfin.schemas.recurrence import RecurringPatternCreate
from campusfin.services.course_service import CourseService
from campusfin.services.errors import NotFoundError, ValidationError
from campusfin.services.planner_service import task_service
from campusfin.services.recurring_pattern_service import RecurringPatternService
from campusfin.services.savings_category_service import SavingsCategoryService


@pytest.fixture
def course(session, user):
    return CourseService(session).create(user.id, CourseCreate(
        code="CS 101",
        name="Intro to Programming",
        term="Fall 2024",
        meeting_times=[{"day": 1, "start": "09:00", "end": "10:15", "location": "Room 4"}],
    ))


@pytest.fixture
def stranger(session):
    other = User(email="other@campusfin.io", password_hash="x")
    session.add(other)
    session.commit()
    session.refresh(other)
    return other


def test_course_dates_must_be_ordered(session, user, course):
    service = CourseService(session)

    with pytest.raises(ValidationError, match="end_date cannot be before start_date"):
        service.create(user.id, CourseCreate(
            code="MATH 2", name="Calculus", start_date=date(2024, 9, 1), end_date=date(2024, 8, 1),
        ))

    service.update(course.id, user.id, CourseUpdate(start_date=date(2024, 9, 1)))
    with pytest.raises(ValidationError):
        service.update(course.id, user.id, CourseUpdate(end_date=date(2024, 8, 31)))


def test_tasks_only_link_to_own_courses(session, user, stranger, course):
    tasks = task_service(session)
    theirs = CourseService(session).create(stranger.id, CourseCreate(code="BIO 1", name="Biology"))

    task = tasks.create(user.id, {"title": "Read chapter 1", "course_id": course.id})
    assert task.course_id == course.id

    with pytest.raises(NotFoundError, match="Course not found"):
        tasks.create(user.id, {"title": "Lab report", "course_id": theirs.id})
    with pytest.raises(NotFoundError, match="Course not found"):
        tasks.update(task.id, user.id, {"course_id": "missing"})

    assert tasks.update(task.id, user.id, {"course_id": ""}).course_id is None


def test_deleting_course_unlinks_planner_items_and_templates(session, user, course):
    task = task_service(session).create(user.id, {"title": "Problem set", "course_id": course.id})
    pattern, _ = RecurringPatternService(session).create(user.id, RecurringPatternCreate(
        entity_type="task",
        recurrence_type="weekly",
        days_of_week=[2],
        template={"title": "Weekly quiz", "course_id": course.id},
    ))

    CourseService(session).delete(course.id, user.id)

    session.expire_all()
    assert session.get(Task, task.id).course_id is None
    assert pattern.template["course_id"] is None
    assert all(t.course_id is None for t in task_service(session).list(user.id))


def test_pattern_template_course_must_exist(session, user):
    with pytest.raises(NotFoundError, match="Course not found"):
        RecurringPatternService(session).create(user.id, RecurringPatternCreate(
            entity_type="deadline",
            recurrence_type="weekly",
            template={"title": "Reading response", "course_id": "missing"},
        ))


def test_savings_categories_are_unique_and_appended(session, user, stranger):
    service = SavingsCategoryService(session)

    emergency = service.create(user.id, SavingsCategoryCreate(name="  Emergency fund ", target_amount=1000))
    travel = service.create(user.id, SavingsCategoryCreate(name="Travel"))
    service.create(stranger.id, SavingsCategoryCreate(name="Travel"))

    assert emergency.name == "Emergency fund"
    assert (emergency.order, travel.order) == (0, 1)
    assert travel.target_amount is None

    with pytest.raises(ValidationError, match="A savings category with this name already exists"):
        service.create(user.id, SavingsCategoryCreate(name="Travel "))
    with pytest.raises(ValidationError, match="A savings category with this name already exists"):
        service.update(travel.id, user.id, SavingsCategoryUpdate(name="Emergency fund"))
    with pytest.raises(ValidationError, match="Category name is required"):
        service.create(user.id, SavingsCategoryCreate(name="   "))
    with pytest.raises(ValidationError, match="Category name cannot be empty"):
        service.update(travel.id, user.id, SavingsCategoryUpdate(name=""))


def test_savings_category_update_and_ownership(session, user, stranger):
    service = SavingsCategoryService(session)
    fund = service.create(user.id, SavingsCategoryCreate(name="Laptop", target_amount=1200))

    updated = service.update(fund.id, user.id, SavingsCategoryUpdate(
        name="Laptop", current_balance=300, target_amount=None, description=None,
    ))
    assert updated.current_balance == 300
    assert updated.target_amount is None
    assert updated.description == ""

    with pytest.raises(NotFoundError, match="Savings category not found"):
        service.delete(fund.id, stranger.id)
    service.delete(fund.id, user.id)
    assert service.list(user.id) == []
