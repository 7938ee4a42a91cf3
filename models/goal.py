import enum
from datetime import datetime, timezone

from sqlalchemy.orm import validates

from models import db
from services.errors import ValidationError
from services.validation import require_date, require_number


class GoalCategory(enum.Enum):
    RETIREMENT = "Retirement"
    EMERGENCY_FUND = "Emergency Fund"
    HOME_PURCHASE = "Home Purchase"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    INVESTMENT = "Investment"

    @classmethod
    def values(cls):
        return [c.value for c in cls]


class Goal(db.Model):
    """A savings goal: reach target_amount by target_date."""

    __tablename__ = "goals"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    target_amount = db.Column(db.Float, nullable=False)
    current_amount = db.Column(db.Float, nullable=False, default=0)
    target_date = db.Column(db.Date, nullable=False)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    sips = db.relationship("Sip", backref="goal", cascade="all, delete-orphan")

    @validates("name")
    def _check_name(self, key, value):
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("name must be a non-empty string", field=key)
        return value.strip()

    @validates("category")
    def _check_category(self, key, value):
        if value not in GoalCategory.values():
            raise ValidationError(
                f"category must be one of {GoalCategory.values()}", field=key
            )
        return value

    @validates("target_amount")
    def _check_target(self, key, value):
        return require_number(value, key, minimum=0, strict=True)

    @validates("current_amount")
    def _check_current(self, key, value):
        return require_number(value, key, minimum=0)

    @validates("target_date")
    def _check_date(self, key, value):
        return require_date(value, key)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "target_amount": self.target_amount,
            "current_amount": self.current_amount,
            "target_date": self.target_date.isoformat(),
        }
