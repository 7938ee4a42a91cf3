from datetime import datetime, timezone

from sqlalchemy.orm import validates

from models import db
from services.errors import ValidationError
from services.validation import require_number


class Holding(db.Model):
    """A position in the portfolio, tagged with the asset class it counts toward."""

    __tablename__ = "holdings"

    id = db.Column(db.Integer, primary_key=True)
    ticker = db.Column(db.String(20), nullable=False)
    name = db.Column(db.String(200))
    asset_class = db.Column(db.String(50), nullable=False)  # 'stocks', 'bonds', 'cash', ...
    quantity = db.Column(db.Float, nullable=False)
    price = db.Column(db.Float)
    value = db.Column(db.Float, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    @validates("ticker", "asset_class")
    def _check_label(self, key, value):
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{key} must be a non-empty string", field=key)
        return value.strip().upper() if key == "ticker" else value.strip().lower()

    @validates("quantity", "value")
    def _check_amount(self, key, value):
        return require_number(value, key, minimum=0)

    @validates("price")
    def _check_price(self, key, value):
        if value is None:
            return None
        return require_number(value, key, minimum=0)

    def to_dict(self):
        return {
            "id": self.id,
            "ticker": self.ticker,
            "name": self.name,
            "asset_class": self.asset_class,
            "quantity": self.quantity,
            "price": self.price,
            "value": self.value,
        }
