"""
Admin log reader: the last hour of ``LogEntry`` rows, bucketed by level and by category.
"""
import datetime as dt
from typing import Dict, List

from tortoise import timezone

from imagia.models.log_entry import LOG_CATEGORIES, LOG_LEVELS, LogEntry
from imagia.services.auth import authenticate_admin

WINDOW = dt.timedelta(minutes=60)


def _entry_to_dict(e: LogEntry) -> dict:
    return {
        "id": e.id,
        "type": e.level,
        "category": e.category,
        "message": e.message,
        "createdAt": e.created_at.isoformat() if e.created_at else None,
    }


def bucket_entries(entries: List[LogEntry]) -> dict:
    """
    Group ``entries`` three ways.

    Entries whose level/category is outside the known sets only show up in the
    flat ``logs`` list.
    """
    by_type: Dict[str, list] = {level: [] for level in LOG_LEVELS}
    by_category: Dict[str, list] = {cat: [] for cat in LOG_CATEGORIES}
    flat = []
    for e in entries:
        item = _entry_to_dict(e)
        flat.append(item)
        if e.level in by_type:
            by_type[e.level].append(item)
        if e.category in by_category:
            by_category[e.category].append(item)

    return {
        "total": len(flat),
        "logs": flat,
        "byType": {k: {"count": len(v), "logs": v} for k, v in by_type.items()},
        "byCategory": {k: {"count": len(v), "logs": v} for k, v in by_category.items()},
    }


async def recent_entries(window: dt.timedelta = WINDOW) -> List[LogEntry]:
    since = timezone.now() - window
    return await LogEntry.filter(created_at__gte=since).order_by("created_at", "id")


async def read_recent_logs(admin_id, admin_token) -> dict:
    await authenticate_admin(admin_id, admin_token)
    return bucket_entries(await recent_entries())
