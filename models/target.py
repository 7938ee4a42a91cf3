from sqlalchemy.orm import validates

from models import db
from services.validation import normalize_allocation, require_number


class TargetAllocation(db.Model):
    """Target allocation percentage for one asset class."""

    __tablename__ = "target_allocations"

    id = db.Column(db.Integer, primary_key=True)
    asset = db.Column(db.String(50), unique=True, nullable=False)  # 'stocks', 'bonds', ...
    target_pct = db.Column(db.Float, nullable=False)
    source = db.Column(db.String(20), default="default")  # 'default', 'manual', 'risk_profile'

    @validates("target_pct")
    def _check_pct(self, key, value):
        return require_number(value, key, minimum=0, maximum=100)

    @classmethod
    def as_vector(cls):
        """Current targets as {asset: pct}."""
        return {t.asset: t.target_pct for t in cls.query.order_by(cls.asset).all()}

    @classmethod
    def replace_all(cls, allocation: dict, source: str = "manual"):
        """Replace every stored target with the given vector."""
        allocation = normalize_allocation(allocation, "allocation")
        cls.query.delete()
        for asset, pct in allocation.items():
            db.session.add(cls(asset=asset, target_pct=pct, source=source))
        db.session.commit()

    def to_dict(self):
        return {
            "id": self.id,
            "asset": self.asset,
            "target_pct": self.target_pct,
            "source": self.source,
        }
