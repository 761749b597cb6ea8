# tests/test_jobs.py
import pytest
from beanie import PydanticObjectId

from devboard.db.documents import User
from devboard.repositories.jobs import build_listing_query, clamp_paging, split_requirements
from tests.helpers import JOB_PAYLOAD, apply_to, bearer, post_job


def test_split_requirements():
    assert split_requirements("  Python \n\n\tSQL\n  \nDocker") == ["Python", "SQL", "Docker"]
    assert split_requirements(["  a ", "", " ", "b"]) == ["a", "b"]
    assert split_requirements(None) == []
    assert split_requirements("") == []

def test_clamp_paging():
    assert clamp_paging(0, 100) == (1, 50)
    assert clamp_paging(-3, 0) == (1, 1)
    assert clamp_paging(4, None) == (4, 10)

def test_listing_query_ignores_all_and_unknown_types():
    assert build_listing_query(job_type="all") == {"status": "active"}
    assert build_listing_query(job_type="Freelance") == {"status": "active"}
    assert build_listing_query(job_type="Contract")["type"] == "Contract"
    # regex metacharacters are matched literally
    assert build_listing_query(search="C++")["$or"][0]["title"]["$regex"] == r"C\+\+"


@pytest.mark.asyncio
async def test_create_job_round_trips_requirements(client, admin):
    job = await post_job(client, admin["token"])
    assert job["requirements"] == ["Python", "MongoDB", "FastAPI"]
    assert job["status"] == "active"
    assert job["postedBy"]["_id"] == admin["user"]["id"]
    assert job["postedBy"]["name"] == "Alice Admin"

    r = await client.get(f"/jobs/{job['_id']}")
    assert r.status_code == 200
    assert r.json()["requirements"] == ["Python", "MongoDB", "FastAPI"]

@pytest.mark.asyncio
async def test_job_records_use_mongo_id_key(client, admin):
    job = await post_job(client, admin["token"])
    assert "id" not in job
    assert "applicationCount" not in job

    listed = (await client.get("/jobs")).json()["jobs"][0]
    assert listed["_id"] == job["_id"]
    assert "applicationCount" not in listed

@pytest.mark.asyncio
async def test_posted_by_is_null_once_poster_is_gone(client, admin):
    job = await post_job(client, admin["token"])
    await (await User.get(PydanticObjectId(admin["user"]["id"]))).delete()

    r = await client.get(f"/jobs/{job['_id']}")
    assert r.status_code == 200
    assert r.json()["postedBy"] is None
    assert (await client.get("/jobs")).json()["jobs"][0]["postedBy"] is None

@pytest.mark.asyncio
async def test_create_job_accepts_requirement_list(client, admin):
    job = await post_job(client, admin["token"], requirements=[" Go ", "", "gRPC"])
    assert job["requirements"] == ["Go", "gRPC"]

@pytest.mark.asyncio
@pytest.mark.parametrize("override", [
    {"title": "QA"},
    {"company": "X"},
    {"description": "short"},
    {"type": "Gig"},
    {"location": ""},
    {"salary": "x" * 51},
    {"requirements": "y" * 201},
])
async def test_create_job_validation(client, admin, override):
    payload = dict(JOB_PAYLOAD, **override)
    r = await client.post("/jobs", json=payload, headers=bearer(admin["token"]))
    assert r.status_code == 400
    assert "error" in r.json()

@pytest.mark.asyncio
async def test_create_job_requires_fields(client, admin):
    payload = dict(JOB_PAYLOAD)
    del payload["company"]
    r = await client.post("/jobs", json=payload, headers=bearer(admin["token"]))
    assert r.status_code == 400
    assert r.json()["error"].startswith("company")

@pytest.mark.asyncio
async def test_get_job_not_found(client):
    assert (await client.get("/jobs/not-an-id")).status_code == 404
    r = await client.get("/jobs/64b000000000000000000000")
    assert r.status_code == 404
    assert r.json() == {"error": "Job not found"}

@pytest.mark.asyncio
async def test_list_filters_and_paging(client, admin):
    token = admin["token"]
    await post_job(client, token, title="Part-time Barista Dev", type="Part-time", location="Austin, TX")
    await post_job(client, token, title="Night Support", type="Part-time", location="Denver, CO")
    await post_job(client, token, title="Platform Engineer", type="Full-time", location="AUSTIN")
    await post_job(client, token, title="Seeker Apply Target", type="Contract", location="Remote")

    r = await client.get("/jobs", params={"type": "Part-time", "location": "austin"})
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 1
    assert [j["title"] for j in body["jobs"]] == ["Part-time Barista Dev"]

    r = await client.get("/jobs", params={"search": "ENGINEER"})
    assert [j["title"] for j in r.json()["jobs"]] == ["Platform Engineer"]

    r = await client.get("/jobs", params={"search": "acme", "type": "all"})
    assert r.json()["total"] == 4

    r = await client.get("/jobs", params={"limit": 2, "page": 2})
    body = r.json()
    assert body["currentPage"] == 2
    assert body["totalPages"] == 2
    assert len(body["jobs"]) == 2

@pytest.mark.asyncio
async def test_list_newest_first_and_limit_clamped(client, admin):
    for i in range(52):
        await post_job(client, admin["token"], title=f"Role number {i}")

    r = await client.get("/jobs", params={"limit": 100})
    body = r.json()
    assert len(body["jobs"]) == 50
    assert body["total"] == 52
    assert body["totalPages"] == 2
    assert body["jobs"][0]["title"] == "Role number 51"

    r = await client.get("/jobs", params={"page": 0, "limit": 0})
    body = r.json()
    assert body["currentPage"] == 1
    assert len(body["jobs"]) == 1

@pytest.mark.asyncio
async def test_delete_without_applications_removes_job(client, admin):
    job = await post_job(client, admin["token"])
    r = await client.delete(f"/jobs/{job['_id']}", headers=bearer(admin["token"]))
    assert r.status_code == 200
    assert r.json() == {"message": "Job deleted successfully"}
    assert (await client.get(f"/jobs/{job['_id']}")).status_code == 404

@pytest.mark.asyncio
async def test_delete_with_applications_closes_job(client, admin, seeker):
    job = await post_job(client, admin["token"])
    assert (await apply_to(client, seeker["token"], job["_id"])).status_code == 201

    for _ in range(2):
        r = await client.delete(f"/jobs/{job['_id']}", headers=bearer(admin["token"]))
        assert r.status_code == 200
        body = r.json()
        assert body["message"] == "Job marked as closed due to existing applications"
        assert body["job"]["status"] == "closed"

    r = await client.get(f"/jobs/{job['_id']}")
    assert r.status_code == 200
    assert r.json()["status"] == "closed"
    assert (await client.get("/jobs")).json()["total"] == 0

@pytest.mark.asyncio
async def test_delete_requires_owner(client, admin, other_admin):
    job = await post_job(client, admin["token"])
    r = await client.delete(f"/jobs/{job['_id']}", headers=bearer(other_admin["token"]))
    assert r.status_code == 403
    r = await client.delete("/jobs/64b000000000000000000000", headers=bearer(admin["token"]))
    assert r.status_code == 404

@pytest.mark.asyncio
async def test_my_jobs_counts_applications(client, admin, other_admin, seeker):
    first = await post_job(client, admin["token"], title="First job")
    second = await post_job(client, admin["token"], title="Second job")
    await post_job(client, other_admin["token"], title="Someone else's")
    await apply_to(client, seeker["token"], first["_id"])

    r = await client.get("/my-jobs", headers=bearer(admin["token"]))
    assert r.status_code == 200
    rows = r.json()
    assert [j["_id"] for j in rows] == [second["_id"], first["_id"]]
    assert [j["applicationCount"] for j in rows] == [0, 1]
