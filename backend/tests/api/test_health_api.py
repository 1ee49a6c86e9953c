"""Health & Readiness — liveness always up, readiness tracks the backing file."""


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_ready_with_valid_file(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"storage": "healthy"}


async def test_not_ready_with_corrupt_file(client, data_file):
    data_file.write_text("{", encoding="utf-8")
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "storage_unavailable"


async def test_ready_probe_never_seeds(client, data_file, backup_count):
    data_file.unlink()
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert not data_file.exists()
    assert backup_count() == 0
