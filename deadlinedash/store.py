"""Project store: CRUD over users, projects, deliverables, tasks and availability.

Routes only talk to ``ProjectStore``; the backing database is whatever
``SQLALCHEMY_DATABASE_URI`` points at (in-memory SQLite by default).
Lookups return ``None`` for missing rows and leave the 404 to the caller.
"""
import logging
from datetime import datetime

from sqlalchemy import not_, update
from sqlalchemy.exc import SQLAlchemyError

from .models import Availability, Deliverable, Project, Task, User, WEEKDAYS, db
from .progress import all_tasks_completed

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo"
DEMO_PASSWORD = "password"


class ProjectStore:
    def __init__(self, database):
        self.db = database

    @property
    def session(self):
        return self.db.session

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Database error during commit: {str(e)}")
            self.session.rollback()
            raise

    # Users

    def create_user(self, username, password):
        user = User(username=username, password=password)
        self.session.add(user)
        self._commit()
        logger.info(f"User created: {username}")
        return user

    def get_user(self, user_id):
        return self.session.get(User, user_id)

    def get_user_by_username(self, username):
        return User.query.filter_by(username=username).first()

    def ensure_demo_user(self):
        user = self.get_user_by_username(DEMO_USERNAME)
        if user is None:
            user = self.create_user(DEMO_USERNAME, DEMO_PASSWORD)
        return user

    # Projects

    def create_project(self, name, user_id, due_date, description=None):
        project = Project(name=name, description=description, user_id=user_id, due_date=due_date)
        self.session.add(project)
        self._commit()
        logger.info(f"Project created: {name} for user {user_id}")
        return project

    def get_project(self, project_id):
        return self.session.get(Project, project_id)

    def list_projects(self, user_id):
        return Project.query.filter_by(user_id=user_id).order_by(Project.id).all()

    def update_project(self, project_id, **changes):
        project = self.get_project(project_id)
        if project is None:
            return None
        for field, value in changes.items():
            setattr(project, field, value)
        project.updated_at = datetime.utcnow()
        self._commit()
        logger.info(f"Project {project_id} updated: {sorted(changes)}")
        return project

    def delete_project(self, project_id):
        project = self.get_project(project_id)
        if project is None:
            return False
        # deliverables, their tasks and the availability row go with it
        self.session.delete(project)
        self._commit()
        logger.info(f"Project {project_id} deleted")
        return True

    # Deliverables

    def create_deliverable(self, project_id, name, description=None, points=None):
        deliverable = Deliverable(project_id=project_id, name=name, description=description, points=points)
        self.session.add(deliverable)
        self._commit()
        logger.info(f"Deliverable created: {name} in project {project_id}")
        return deliverable

    def get_deliverable(self, deliverable_id):
        return self.session.get(Deliverable, deliverable_id)

    def list_deliverables(self, project_id):
        return Deliverable.query.filter_by(project_id=project_id).order_by(Deliverable.id).all()

    def delete_deliverable(self, deliverable_id):
        deliverable = self.get_deliverable(deliverable_id)
        if deliverable is None:
            return False
        self.session.delete(deliverable)
        self._commit()
        logger.info(f"Deliverable {deliverable_id} deleted")
        return True

    def toggle_deliverable(self, deliverable_id):
        """Flip a deliverable's completion; completing it also completes its tasks."""
        deliverable = self.get_deliverable(deliverable_id)
        if deliverable is None:
            return None
        deliverable.completed = not deliverable.completed
        if deliverable.completed:
            for task in deliverable.tasks:
                task.completed = True
        self._commit()
        logger.info(f"Deliverable {deliverable_id} toggled to completed={deliverable.completed}")
        return deliverable

    # Tasks

    def create_task(self, deliverable_id, name, due_date, description=None, priority=1,
                    estimated_minutes=None, commit=True):
        task = Task(
            deliverable_id=deliverable_id,
            name=name,
            description=description,
            due_date=due_date,
            priority=priority,
            estimated_minutes=estimated_minutes,
            completed=False,
        )
        self.session.add(task)
        if commit:
            self._commit()
        return task

    def add_scheduled_tasks(self, planned_tasks):
        """Persist distributor output in one transaction."""
        tasks = [
            self.create_task(
                deliverable_id=planned.deliverable_id,
                name=planned.name,
                due_date=planned.due_date,
                description=planned.description,
                priority=planned.priority,
                estimated_minutes=planned.estimated_minutes,
                commit=False,
            )
            for planned in planned_tasks
        ]
        self._commit()
        logger.info(f"Stored {len(tasks)} scheduled tasks")
        return tasks

    def get_task(self, task_id):
        return self.session.get(Task, task_id)

    def list_tasks(self, deliverable_id):
        return Task.query.filter_by(deliverable_id=deliverable_id).order_by(Task.id).all()

    def toggle_task(self, task_id):
        """Flip ``completed`` on a task.

        The flip is a single UPDATE so two concurrent toggles cannot lose one
        another. When the flip leaves every task of the deliverable done, the
        deliverable is marked completed; un-completing a task later leaves the
        deliverable as it is.
        """
        task = self.get_task(task_id)
        if task is None:
            return None
        self.session.execute(
            update(Task)
            .where(Task.id == task_id)
            .values(completed=not_(Task.completed))
            .execution_options(synchronize_session=False)
        )
        self.session.refresh(task)
        deliverable = task.deliverable
        if not deliverable.completed and all_tasks_completed(deliverable.tasks):
            deliverable.completed = True
            logger.info(f"Deliverable {deliverable.id} completed by its last task")
        self._commit()
        logger.info(f"Task {task_id} toggled to completed={task.completed}")
        return task

    # Availability

    def get_availability(self, project_id):
        return Availability.query.filter_by(project_id=project_id).first()

    def upsert_availability(self, project_id, hours_per_day=2, **days):
        availability = self.get_availability(project_id)
        if availability is None:
            availability = Availability(project_id=project_id)
            self.session.add(availability)
        for day in WEEKDAYS:
            if day in days:
                setattr(availability, day, days[day])
        availability.hours_per_day = hours_per_day
        self._commit()
        logger.info(f"Availability saved for project {project_id}")
        return availability


store = ProjectStore(db)
