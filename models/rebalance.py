from datetime import datetime, timezone

from models import db


class RebalanceExecution(db.Model):
    """History entry for a (simulated) rebalance run."""

    __tablename__ = "rebalance_executions"

    id = db.Column(db.Integer, primary_key=True)
    execution_id = db.Column(db.String(40), unique=True, nullable=False)
    executed_on = db.Column(db.Date, nullable=False)
    kind = db.Column(db.String(20), default="manual")  # 'manual' or 'automatic'
    reason = db.Column(db.String(200))
    # JSON: [{"asset": "stocks", "action": "sell", "amount": 15000}, ...]
    changes = db.Column(db.JSON, nullable=False, default=list)
    transaction_cost = db.Column(db.Float, default=0)
    status = db.Column(db.String(20), default="in_progress")
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    def to_dict(self):
        return {
            "id": self.id,
            "execution_id": self.execution_id,
            "date": self.executed_on.isoformat(),
            "type": self.kind,
            "reason": self.reason,
            "changes": self.changes,
            "transaction_cost": self.transaction_cost,
            "status": self.status,
        }

    @classmethod
    def record(cls, execution: dict, reason: str = "User-initiated rebalancing"):
        """Save a history entry for an execute_plan() result."""
        entry = cls(
            execution_id=execution["execution_id"],
            executed_on=datetime.fromisoformat(execution["start_time"]).date(),
            kind="manual",
            reason=reason,
            changes=[
                {"asset": t["asset"], "action": t["action"], "amount": t["amount"]}
                for t in execution["transactions"]
            ],
            transaction_cost=execution["total_cost"],
            status="in_progress",
        )
        db.session.add(entry)
        db.session.commit()
        return entry
