import logging
import os
from datetime import date

from dotenv import load_dotenv
from flask import Flask, jsonify, request

load_dotenv()

from config import (
    AUTO_REBALANCING,
    DEFAULT_TARGET_ALLOCATION,
    DRIFT_THRESHOLD_PCT,
    MIN_TRANSACTION_AMOUNT,
    NOTIFICATIONS_ENABLED,
    REBALANCING_FREQUENCY,
)
from models import db, GoalCategory, Holding, RebalanceExecution, TargetAllocation
from services.analyzer import generate_commentary
from services.drift import analyze_drift
from services.errors import NotFoundError, ValidationError
from services.projection import (
    generate_projection,
    milestones,
    months_remaining,
    progress_percentage,
    projected_completion_date,
    remaining_amount,
    required_monthly_contribution,
)
from services.rebalancer import (
    build_plan,
    compute_allocation,
    execute_plan,
    rebalancing_alerts,
    summarize_plan,
)
from services.repository import GoalRepository, Repository, SipRepository
from services.risk_profile import calculate_risk_profile
from services.sip import total_monthly_commitment, upcoming_investments
from services.validation import normalize_allocation, require_date, require_number

LOGGER = logging.getLogger(__name__)

app = Flask(__name__)

# In-memory SQLite by default: state lives only as long as the process
app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite://")
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

db.init_app(app)

goals = GoalRepository()
sips = SipRepository()
holdings = Repository(Holding, "Holding")


def init_db():
    """Create tables and seed the default target allocation."""
    db.create_all()
    if TargetAllocation.query.count() == 0:
        TargetAllocation.replace_all(DEFAULT_TARGET_ALLOCATION, source="default")


with app.app_context():
    init_db()


# ── Helpers ──────────────────────────────────────────────────────────────

def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _float_arg(name: str, default: float | None = None) -> float | None:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {raw!r}", field=name)


def _as_of() -> date:
    """Reference date for projections; ?as_of=YYYY-MM-DD overrides today."""
    raw = request.args.get("as_of")
    return require_date(raw, "as_of") if raw else date.today()


def _current_assessment():
    threshold = _float_arg("threshold", DRIFT_THRESHOLD_PCT)
    portfolio = compute_allocation(Holding.query.all())
    return analyze_drift(
        portfolio["allocation"],
        TargetAllocation.as_vector(),
        portfolio["total_value"],
        threshold=threshold,
    )


@app.errorhandler(ValidationError)
def handle_validation_error(e):
    db.session.rollback()
    return jsonify(e.to_dict()), 400


@app.errorhandler(NotFoundError)
def handle_not_found(e):
    return jsonify({"error": str(e)}), 404


# ── Goals ────────────────────────────────────────────────────────────────

@app.route("/api/goals")
def list_goals():
    """Return all goals (optionally by category)."""
    category = request.args.get("category")
    if category:
        if category not in GoalCategory.values():
            raise ValidationError(f"category must be one of {GoalCategory.values()}", field="category")
        records = goals.get_by_category(category)
    else:
        records = goals.get_all()
    return jsonify([g.to_dict() for g in records])


@app.route("/api/goals", methods=["POST"])
def create_goal():
    goal = goals.create(_json_body())
    return jsonify(goal.to_dict()), 201


@app.route("/api/goals/<int:goal_id>")
def get_goal(goal_id):
    return jsonify(goals.get_by_id(goal_id).to_dict())


@app.route("/api/goals/<int:goal_id>", methods=["PUT"])
def update_goal(goal_id):
    return jsonify(goals.update(goal_id, _json_body()).to_dict())


@app.route("/api/goals/<int:goal_id>", methods=["DELETE"])
def delete_goal(goal_id):
    return jsonify(goals.delete(goal_id))


@app.route("/api/goals/<int:goal_id>/progress", methods=["PUT"])
def update_goal_progress(goal_id):
    data = _json_body()
    if "current_amount" not in data:
        raise ValidationError("current_amount is required", field="current_amount")
    return jsonify(goals.update_progress(goal_id, data["current_amount"]).to_dict())


@app.route("/api/goals/<int:goal_id>/projection")
def goal_projection(goal_id):
    """Projection chart data plus the numbers shown beside it."""
    goal = goals.get_by_id(goal_id)
    today = _as_of()

    required = required_monthly_contribution(
        goal.target_amount, goal.current_amount, goal.target_date, today
    )
    monthly = _float_arg("monthly", required)
    completion = projected_completion_date(
        goal.target_amount, goal.current_amount, monthly, today
    )

    return jsonify({
        "goal": goal.to_dict(),
        "as_of": today.isoformat(),
        "progress": round(progress_percentage(goal), 2),
        "remaining_amount": remaining_amount(goal),
        "months_remaining": months_remaining(goal.target_date, today),
        "required_monthly": round(required, 2),
        "monthly_contribution": monthly,
        "projected_completion": completion.isoformat() if completion else None,
        "points": generate_projection(goal, monthly, today),
    })


@app.route("/api/goals/<int:goal_id>/milestones")
def goal_milestones(goal_id):
    return jsonify(milestones(goals.get_by_id(goal_id)))


# ── SIPs ─────────────────────────────────────────────────────────────────

@app.route("/api/sips")
def list_sips():
    goal_id = request.args.get("goal_id", type=int)
    records = sips.get_by_goal(goal_id) if goal_id is not None else sips.get_all()
    return jsonify([s.to_dict(_as_of()) for s in records])


@app.route("/api/sips", methods=["POST"])
def create_sip():
    data = _json_body()
    if data.get("goal_id") is not None:
        goals.get_by_id(data["goal_id"])
    return jsonify(sips.create(data).to_dict(_as_of())), 201


@app.route("/api/sips/<int:sip_id>")
def get_sip(sip_id):
    return jsonify(sips.get_by_id(sip_id).to_dict(_as_of()))


@app.route("/api/sips/<int:sip_id>", methods=["PUT"])
def update_sip(sip_id):
    return jsonify(sips.update(sip_id, _json_body()).to_dict(_as_of()))


@app.route("/api/sips/<int:sip_id>", methods=["DELETE"])
def delete_sip(sip_id):
    return jsonify(sips.delete(sip_id))


@app.route("/api/sips/<int:sip_id>/toggle", methods=["POST"])
def toggle_sip(sip_id):
    """Pause an active SIP or resume a paused one."""
    return jsonify(sips.toggle_status(sip_id).to_dict(_as_of()))


@app.route("/api/sips/commitment")
def sip_commitment():
    return jsonify({"monthly_commitment": total_monthly_commitment(sips.get_active())})


@app.route("/api/sips/calendar")
def sip_calendar():
    days = request.args.get("days", 30, type=int)
    return jsonify(upcoming_investments(sips.get_active(), _as_of(), days=days))


# ── Holdings ─────────────────────────────────────────────────────────────

@app.route("/api/holdings")
def list_holdings():
    """Return all holdings."""
    records = Holding.query.order_by(Holding.value.desc()).all()
    return jsonify([h.to_dict() for h in records])


@app.route("/api/holdings", methods=["POST"])
def add_holding():
    data = _json_body()
    # Derive value from quantity x price when not given
    if "value" not in data:
        quantity = require_number(data.get("quantity"), "quantity", minimum=0)
        price = require_number(data.get("price"), "price", minimum=0)
        data["value"] = round(quantity * price, 2)
    return jsonify(holdings.create(data).to_dict()), 201


@app.route("/api/holdings/<int:holding_id>", methods=["PUT"])
def update_holding(holding_id):
    return jsonify(holdings.update(holding_id, _json_body()).to_dict())


@app.route("/api/holdings/<int:holding_id>", methods=["DELETE"])
def delete_holding(holding_id):
    return jsonify(holdings.delete(holding_id))


@app.route("/api/holdings", methods=["DELETE"])
def clear_holdings():
    """Clear all holdings."""
    Holding.query.delete()
    db.session.commit()
    return jsonify({"message": "Holdings cleared"})


@app.route("/api/allocation")
def get_allocation():
    """Current allocation by asset class."""
    return jsonify(compute_allocation(Holding.query.all()))


# ── Targets ──────────────────────────────────────────────────────────────

@app.route("/api/targets")
def list_targets():
    """Return all target allocations."""
    targets = TargetAllocation.query.order_by(TargetAllocation.asset).all()
    return jsonify([t.to_dict() for t in targets])


@app.route("/api/targets", methods=["PUT"])
def save_targets():
    """Save target allocations (replaces all targets)."""
    allocation = _json_body().get("allocation")
    if not isinstance(allocation, dict) or not allocation:
        raise ValidationError("allocation must be a non-empty object", field="allocation")

    allocation = normalize_allocation(allocation, "allocation")

    # Validate percentages sum to ~100
    total = sum(allocation.values())
    if abs(total - 100) > 1:
        raise ValidationError(f"Target percentages must sum to 100 (got {total})", field="allocation")

    TargetAllocation.replace_all(allocation, source="manual")
    LOGGER.info("Saved %d targets", len(allocation))
    return jsonify({"message": f"Saved {len(allocation)} targets", "allocation": TargetAllocation.as_vector()})


@app.route("/api/targets/risk-profile", methods=["POST"])
def targets_from_risk_profile():
    """Score the risk questionnaire; with "apply": true, adopt its allocation as targets."""
    data = _json_body()
    profile = calculate_risk_profile(data.get("answers"))
    if data.get("apply"):
        TargetAllocation.replace_all(profile["allocation"], source="risk_profile")
        LOGGER.info("Targets replaced from %s risk profile", profile["profile"])
    return jsonify(profile)


# ── Rebalance ────────────────────────────────────────────────────────────

@app.route("/api/drift")
def get_drift():
    """Drift of the current allocation against targets."""
    return jsonify(_current_assessment())


@app.route("/api/rebalance")
def get_rebalance():
    """Compute a rebalancing plan."""
    plan = build_plan(_current_assessment())
    plan["summary"] = summarize_plan(plan)
    return jsonify(plan)


@app.route("/api/rebalance/execute", methods=["POST"])
def run_rebalance():
    """Simulate executing the current plan and record it in history."""
    if Holding.query.count() == 0:
        return jsonify({"error": "No holdings added yet"}), 400

    plan = build_plan(_current_assessment())
    execution = execute_plan(plan)
    RebalanceExecution.record(execution)
    return jsonify(execution)


@app.route("/api/rebalance/history")
def rebalance_history():
    entries = RebalanceExecution.query.order_by(RebalanceExecution.id).all()
    return jsonify([e.to_dict() for e in entries])


@app.route("/api/rebalance/alerts")
def rebalance_alerts():
    return jsonify(rebalancing_alerts(_current_assessment()))


@app.route("/api/rebalance/settings")
def rebalance_settings():
    return jsonify({
        "drift_threshold": DRIFT_THRESHOLD_PCT,
        "auto_rebalancing": AUTO_REBALANCING,
        "rebalancing_frequency": REBALANCING_FREQUENCY,
        "notifications_enabled": NOTIFICATIONS_ENABLED,
        "min_transaction_amount": MIN_TRANSACTION_AMOUNT,
    })


@app.route("/api/analysis")
def get_analysis():
    """AI commentary on the current plan."""
    plan = build_plan(_current_assessment())
    commentary = generate_commentary(plan, [g.to_dict() for g in goals.get_all()])
    return jsonify({"analysis": commentary})


# ── Run ──────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(debug=True, port=int(os.environ.get("PORT", 5002)))
