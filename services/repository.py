"""
Record stores.

A Repository gives the API layer get_all / get_by_id / create / update /
delete over one model class. The engine never touches these; it only sees
the records they return.
"""

import logging

from models import db
from models.goal import Goal
from models.sip import Sip
from services.errors import NotFoundError, ValidationError

LOGGER = logging.getLogger(__name__)


class Repository:
    # Server-managed columns; never taken from a payload
    read_only = {"created_at", "updated_at"}

    def __init__(self, model, kind: str | None = None):
        self.model = model
        self.kind = kind or model.__name__

    @property
    def _columns(self):
        return {
            c.name: c
            for c in self.model.__table__.columns
            if not c.primary_key and c.name not in self.read_only
        }

    def _writable(self, data: dict) -> dict:
        if not isinstance(data, dict):
            raise ValidationError(f"{self.kind} payload must be an object")
        unknown = sorted(set(data) - set(self._columns))
        if unknown:
            raise ValidationError(f"Unknown {self.kind} field(s): {', '.join(unknown)}")
        return dict(data)

    def _check_required(self, data: dict):
        for name, column in self._columns.items():
            if column.nullable or column.default is not None:
                continue
            if data.get(name) is None:
                raise ValidationError(f"{name} is required", field=name)

    def get_all(self):
        return self.model.query.order_by(self.model.id).all()

    def get_by_id(self, record_id):
        record = db.session.get(self.model, record_id)
        if record is None:
            raise NotFoundError(self.kind, record_id)
        return record

    def create(self, data: dict):
        fields = self._writable(data)
        self._check_required(fields)
        record = self.model(**fields)
        db.session.add(record)
        db.session.commit()
        LOGGER.info("Created %s %s", self.kind, record.id)
        return record

    def update(self, record_id, data: dict):
        fields = self._writable(data)
        record = self.get_by_id(record_id)
        try:
            for name, value in fields.items():
                setattr(record, name, value)
        except ValidationError:
            db.session.rollback()
            raise
        db.session.commit()
        LOGGER.info("Updated %s %s (%s)", self.kind, record_id, ", ".join(sorted(fields)))
        return record

    def delete(self, record_id):
        record = self.get_by_id(record_id)
        snapshot = record.to_dict()
        db.session.delete(record)
        db.session.commit()
        LOGGER.info("Deleted %s %s", self.kind, record_id)
        return snapshot


class GoalRepository(Repository):
    def __init__(self):
        super().__init__(Goal, "Goal")

    def get_by_category(self, category: str):
        return Goal.query.filter_by(category=category).order_by(Goal.id).all()

    def update_progress(self, record_id, current_amount):
        return self.update(record_id, {"current_amount": current_amount})


class SipRepository(Repository):
    def __init__(self):
        super().__init__(Sip, "SIP")

    def create(self, data: dict):
        fields = self._writable(data)
        fields.setdefault("status", "active")
        return super().create(fields)

    def get_by_goal(self, goal_id):
        return Sip.query.filter_by(goal_id=goal_id).order_by(Sip.id).all()

    def get_active(self):
        return Sip.query.filter_by(status="active").order_by(Sip.id).all()

    def toggle_status(self, record_id):
        sip = self.get_by_id(record_id)
        new_status = "paused" if sip.status == "active" else "active"
        return self.update(record_id, {"status": new_status})
