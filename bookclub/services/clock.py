from datetime import date, datetime, timezone

from bookclub.services.errors import ValidationError


def utcnow():
    """Current time as a naive UTC datetime, the form the store keeps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value):
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def coerce_datetime(value, field_name, required=False):
    """Accept a datetime, a date or an ISO 8601 string; return naive UTC."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{field_name} is required.")
        return None

    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError(
                f"{field_name} must be an ISO 8601 date or datetime."
            ) from None
        return to_naive_utc(parsed)

    raise ValidationError(f"{field_name} must be an ISO 8601 date or datetime.")
