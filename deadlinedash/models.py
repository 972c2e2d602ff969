from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

DEFAULT_AVAILABILITY = {
    "monday": True,
    "tuesday": True,
    "wednesday": True,
    "thursday": True,
    "friday": True,
    "saturday": False,
    "sunday": False,
    "hours_per_day": 2,
}

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _iso(value):
    return value.isoformat() if value is not None else None


class User(db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password = db.Column(db.String(120), nullable=False)
    projects = db.relationship("Project", backref="user", lazy=True)

    def to_dict(self):
        return {"id": self.id, "username": self.username}


class Project(db.Model):
    __tablename__ = "projects"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    due_date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deliverables = db.relationship(
        "Deliverable", backref="project", lazy=True, cascade="all, delete-orphan",
        order_by="Deliverable.id",
    )
    availability = db.relationship(
        "Availability", backref="project", uselist=False, lazy=True, cascade="all, delete-orphan"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "userId": self.user_id,
            "dueDate": _iso(self.due_date),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Deliverable(db.Model):
    __tablename__ = "deliverables"
    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(db.Integer, db.ForeignKey("projects.id"), nullable=False)
    name = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text)
    points = db.Column(db.Integer)  # informational only, never used for scheduling
    completed = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    tasks = db.relationship(
        "Task", backref="deliverable", lazy=True, cascade="all, delete-orphan",
        order_by="Task.id",
    )

    def to_dict(self, with_tasks=False):
        data = {
            "id": self.id,
            "projectId": self.project_id,
            "name": self.name,
            "description": self.description,
            "points": self.points,
            "completed": self.completed,
            "createdAt": _iso(self.created_at),
        }
        if with_tasks:
            data["tasks"] = [task.to_dict() for task in self.tasks]
        return data


class Task(db.Model):
    __tablename__ = "tasks"
    id = db.Column(db.Integer, primary_key=True)
    deliverable_id = db.Column(db.Integer, db.ForeignKey("deliverables.id"), nullable=False)
    name = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text)
    due_date = db.Column(db.Date, nullable=False)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    priority = db.Column(db.Integer, default=1, nullable=False)  # 1 = low, 2 = medium, 3 = high
    estimated_minutes = db.Column(db.Integer)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "deliverableId": self.deliverable_id,
            "name": self.name,
            "description": self.description,
            "dueDate": _iso(self.due_date),
            "completed": self.completed,
            "priority": self.priority,
            "estimatedMinutes": self.estimated_minutes,
            "createdAt": _iso(self.created_at),
        }


class Availability(db.Model):
    __tablename__ = "availability"
    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(db.Integer, db.ForeignKey("projects.id"), unique=True, nullable=False)
    monday = db.Column(db.Boolean, default=True, nullable=False)
    tuesday = db.Column(db.Boolean, default=True, nullable=False)
    wednesday = db.Column(db.Boolean, default=True, nullable=False)
    thursday = db.Column(db.Boolean, default=True, nullable=False)
    friday = db.Column(db.Boolean, default=True, nullable=False)
    saturday = db.Column(db.Boolean, default=False, nullable=False)
    sunday = db.Column(db.Boolean, default=False, nullable=False)
    hours_per_day = db.Column(db.Integer, default=2, nullable=False)  # stored, not used by the scheduler

    def to_dict(self):
        data = {"id": self.id, "projectId": self.project_id}
        for day in WEEKDAYS:
            data[day] = getattr(self, day)
        data["hoursPerDay"] = self.hours_per_day
        return data


def default_availability_dict(project_id):
    data = {"id": 0, "projectId": project_id}
    for day in WEEKDAYS:
        data[day] = DEFAULT_AVAILABILITY[day]
    data["hoursPerDay"] = DEFAULT_AVAILABILITY["hours_per_day"]
    return data
