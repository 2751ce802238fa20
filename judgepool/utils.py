import datetime
import re


def utcnow() -> datetime.datetime:
    # MongoDB hands back naive datetimes, so everything is kept as naive UTC
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime.datetime | None) -> datetime.datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)


def generate_slug(name: str) -> str:
    slug = re.sub(r"\s+", "-", name.lower())
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def percentage(part: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(part / total * 100, 2)
