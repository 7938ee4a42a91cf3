from datetime import date, datetime, timezone

from sqlalchemy.orm import validates

from config import SIP_FREQUENCY_MULTIPLIERS
from models import db
from services.errors import ValidationError
from services.sip import next_investment_date
from services.validation import require_date, require_number


class Sip(db.Model):
    """A systematic investment plan: a recurring contribution toward a goal."""

    __tablename__ = "sips"

    id = db.Column(db.Integer, primary_key=True)
    goal_id = db.Column(db.Integer, db.ForeignKey("goals.id"), nullable=True)
    name = db.Column(db.String(200))
    amount = db.Column(db.Float, nullable=False)
    frequency = db.Column(db.String(20), nullable=False, default="monthly")
    start_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="active")  # 'active' or 'paused'
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    @validates("amount")
    def _check_amount(self, key, value):
        return require_number(value, key, minimum=0, strict=True)

    @validates("frequency")
    def _check_frequency(self, key, value):
        if value not in SIP_FREQUENCY_MULTIPLIERS:
            raise ValidationError(
                f"frequency must be one of {sorted(SIP_FREQUENCY_MULTIPLIERS)}", field=key
            )
        return value

    @validates("status")
    def _check_status(self, key, value):
        if value not in ("active", "paused"):
            raise ValidationError("status must be 'active' or 'paused'", field=key)
        return value

    @validates("start_date")
    def _check_date(self, key, value):
        return require_date(value, key)

    def to_dict(self, today=None):
        return {
            "id": self.id,
            "goal_id": self.goal_id,
            "name": self.name,
            "amount": self.amount,
            "frequency": self.frequency,
            "start_date": self.start_date.isoformat(),
            "next_investment_date": next_investment_date(
                self.start_date, self.frequency, today or date.today()
            ).isoformat(),
            "status": self.status,
        }
