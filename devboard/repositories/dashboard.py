# devboard/repositories/dashboard.py
import calendar
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from beanie import PydanticObjectId
from beanie.operators import In

from devboard.db.documents import Application, Job, utcnow
from devboard.repositories.jobs import job_ids_for_owner, list_my_jobs

RECENT_JOBS = 10
MONTHS_BACK = 6


def months_ago(months: int, now: Optional[datetime] = None) -> datetime:
    """
    Same day ``months`` earlier; a day the target month lacks rolls over
    into the following month (Aug 31 minus 6 months is Mar 3, or Mar 2 in
    a leap year).
    """
    now = now or utcnow()
    month = now.month - months
    year = now.year
    while month < 1:
        month += 12
        year -= 1
    last_day = calendar.monthrange(year, month)[1]
    overflow = max(now.day - last_day, 0)
    return now.replace(year=year, month=month, day=now.day - overflow) + timedelta(days=overflow)

async def dashboard_data(admin_id: str) -> Dict[str, Any]:
    """Headline numbers and chart series, all restricted to the admin's own jobs."""
    owner = PydanticObjectId(admin_id)
    job_ids = await job_ids_for_owner(admin_id)

    total_jobs = len(job_ids)
    active_jobs = await Job.find(Job.posted_by == owner, Job.status == "active").count()
    total_applications = await Application.find(In(Application.job_id, job_ids)).count() if job_ids else 0
    pending_applications = (
        await Application.find(In(Application.job_id, job_ids), Application.status == "pending").count()
        if job_ids else 0
    )

    by_month: List[Dict[str, Any]] = []
    by_status: List[Dict[str, Any]] = []
    if job_ids:
        by_month = await Application.aggregate([
            {"$match": {"job_id": {"$in": job_ids}, "applied_at": {"$gte": months_ago(MONTHS_BACK)}}},
            {"$group": {
                "_id": {"year": {"$year": "$applied_at"}, "month": {"$month": "$applied_at"}},
                "count": {"$sum": 1},
            }},
            {"$sort": {"_id.year": 1, "_id.month": 1}},
        ]).to_list()
        by_status = await Application.aggregate([
            {"$match": {"job_id": {"$in": job_ids}}},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ]).to_list()

    return {
        "stats": {
            "total_jobs": total_jobs,
            "active_jobs": active_jobs,
            "total_applications": total_applications,
            "pending_applications": pending_applications,
        },
        "applications_by_month": by_month,
        "applications_by_status": by_status,
        "recent_jobs": await list_my_jobs(admin_id, limit=RECENT_JOBS),
    }
