# tests/helpers.py
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"

JOB_PAYLOAD = {
    "title": "Backend Engineer",
    "company": "Acme Corp",
    "description": "Build and run the APIs behind our job board.",
    "requirements": "Python\n\n  MongoDB  \nFastAPI\n",
    "location": "Austin, TX",
    "type": "Full-time",
    "salary": "$120k",
}


def bearer(token):
    return {"Authorization": f"Bearer {token}"}

async def register(ac, email, role="user", name="Test Person", password="secret123"):
    r = await ac.post("/register", json={"name": name, "email": email, "password": password, "role": role})
    assert r.status_code == 201, r.text
    return r.json()

async def post_job(ac, token, **overrides):
    payload = dict(JOB_PAYLOAD, **overrides)
    r = await ac.post("/jobs", json=payload, headers=bearer(token))
    assert r.status_code == 201, r.text
    return r.json()

async def apply_to(ac, token, job_id, content=PDF_BYTES, filename="cv.pdf",
                   content_type="application/pdf", cover_letter=None):
    data = {"jobId": job_id}
    if cover_letter is not None:
        data["coverLetter"] = cover_letter
    files = {"resume": (filename, content, content_type)}
    return await ac.post("/apply", data=data, files=files, headers=bearer(token))
