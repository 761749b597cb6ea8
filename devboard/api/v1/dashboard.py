# devboard/api/v1/dashboard.py
from fastapi import APIRouter, Depends

from devboard.api.v1.auth import require_admin
from devboard.api.v1.schemas import DashboardCharts, DashboardOut, DashboardStats, my_job_out
from devboard.core.security import TokenClaims
from devboard.repositories.dashboard import dashboard_data
from devboard.repositories.jobs import posters_for

router = APIRouter()


@router.get("/dashboard-data", response_model=DashboardOut)
async def get_dashboard_data(admin: TokenClaims = Depends(require_admin)):
    data = await dashboard_data(admin.user_id)
    posters = await posters_for([j for j, _ in data["recent_jobs"]])
    return DashboardOut(
        stats=DashboardStats(**data["stats"]),
        charts=DashboardCharts(
            applications_by_month=data["applications_by_month"],
            applications_by_status=data["applications_by_status"],
        ),
        recent_jobs=[my_job_out(j, posters.get(j.posted_by), count) for j, count in data["recent_jobs"]],
    )
