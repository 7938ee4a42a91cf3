"""Error types shared by the planner engine and the API layer."""


class ValidationError(ValueError):
    """Input violates a structural invariant (negative amount, bad date, ...)."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self):
        payload = {"error": self.message}
        if self.field:
            payload["field"] = self.field
        return payload


class NotFoundError(LookupError):
    """A store lookup by id found nothing."""

    def __init__(self, kind: str, record_id):
        super().__init__(f"{kind} with id {record_id} not found")
        self.kind = kind
        self.record_id = record_id
