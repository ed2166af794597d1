"""Test result API endpoints and their effect on runner best times."""

import uuid

from sqlalchemy import func, select

from runrun.models import Result
from runrun.race_time import current_year

THIS_YEAR = current_year()


def _headers(user) -> dict[str, str]:
    return {"Token": user.access_token}


def _result_json(runner_id, race_result: str, year: int = THIS_YEAR) -> dict:
    return {
        "runner_id": str(runner_id),
        "race_result": race_result,
        "location": "Berlin",
        "position": 4,
        "year": year,
    }


async def test_create_result_requires_admin(runner_user, runner, test_client):
    async with test_client as client:
        response = await client.post(
            "/result", json=_result_json(runner.id, "02:00:00"), headers=_headers(runner_user)
        )
    assert response.status_code == 401


async def test_create_result_returns_result(admin, runner, test_client, load_runner):
    async with test_client as client:
        response = await client.post(
            "/result", json=_result_json(runner.id, "02:05:30"), headers=_headers(admin)
        )

    assert response.status_code == 200
    data = response.json()
    uuid.UUID(data["id"])
    assert data["runner_id"] == str(runner.id)
    assert data["race_result"] == "02:05:30"
    assert data["location"] == "Berlin"
    assert data["position"] == 4
    assert data["year"] == THIS_YEAR

    stored = await load_runner(runner.id)
    assert stored.personal_best == "02:05:30"
    assert stored.season_best == "02:05:30"


async def test_create_result_for_unknown_runner(admin, test_client, async_session):
    async with test_client as client:
        response = await client.post(
            "/result", json=_result_json(uuid.uuid4(), "02:00:00"), headers=_headers(admin)
        )

    assert response.status_code == 404
    async with async_session() as db:
        assert await db.scalar(select(func.count(Result.id))) == 0


async def test_create_result_bad_race_time(admin, runner, test_client):
    async with test_client as client:
        response = await client.post(
            "/result", json=_result_json(runner.id, "2:5:30"), headers=_headers(admin)
        )
    assert response.status_code == 400
    assert response.json()["status"] == 400


async def test_create_result_future_year(admin, runner, test_client):
    async with test_client as client:
        response = await client.post(
            "/result",
            json=_result_json(runner.id, "02:00:00", year=THIS_YEAR + 1),
            headers=_headers(admin),
        )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid year for race result."


async def test_corrupt_cached_best_is_500(admin, runner, set_bests, test_client):
    await set_bests(runner.id, "garbage", None)

    async with test_client as client:
        response = await client.post(
            "/result", json=_result_json(runner.id, "02:00:00"), headers=_headers(admin)
        )
    assert response.status_code == 500
    assert response.json() == {"message": "Failed to parse personal best", "status": 500}


async def test_delete_result_recomputes_bests(admin, runner, test_client, load_runner):
    async with test_client as client:
        first = await client.post(
            "/result", json=_result_json(runner.id, "02:10:00"), headers=_headers(admin)
        )
        best = await client.post(
            "/result", json=_result_json(runner.id, "01:59:00"), headers=_headers(admin)
        )
        assert (await load_runner(runner.id)).personal_best == "01:59:00"

        response = await client.delete(f"/result/{best.json()['id']}", headers=_headers(admin))
        assert response.status_code == 204
        stored = await load_runner(runner.id)
        assert stored.personal_best == "02:10:00"
        assert stored.season_best == "02:10:00"

        response = await client.delete(f"/result/{first.json()['id']}", headers=_headers(admin))
        assert response.status_code == 204
        stored = await load_runner(runner.id)
        assert stored.personal_best is None
        assert stored.season_best is None


async def test_delete_unknown_result(admin, test_client):
    async with test_client as client:
        response = await client.delete(f"/result/{uuid.uuid4()}", headers=_headers(admin))
    assert response.status_code == 404
    assert response.json() == {"message": "Result not found", "status": 404}


async def test_delete_result_requires_admin(runner_user, test_client):
    async with test_client as client:
        response = await client.delete(f"/result/{uuid.uuid4()}", headers=_headers(runner_user))
    assert response.status_code == 401
