import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch

from app.core.config import Settings
from app.core.exceptions import ConfigurationError, StoreConnectionError
from app.main import LIVENESS_MESSAGE, create_app, run
from app.models.contract import CONTRACT_VERSION, CONTRACT_VERSION_HEADER

URL = "/api/operations"


def call(client, operation, **variables):
    payload = {"operation": operation}
    if variables:
        payload["variables"] = variables
    return client.post(URL, json=payload)


def list_bookings(client):
    response = call(client, "getBookings")
    assert response.status_code == 200
    return response.json()["data"]["getBookings"]


def create(client, data):
    response = call(client, "createBooking", input=data)
    assert response.status_code == 200
    return response.json()["data"]["createBooking"]


def test_liveness(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == LIVENESS_MESSAGE


def test_liveness_ignores_store_health(client):
    with patch("app.services.booking_store.BookingStore.find_all", new_callable=AsyncMock) as mock_find:
        mock_find.side_effect = RuntimeError("store down")
        assert client.get("/").status_code == 200
    mock_find.assert_not_called()


def test_create_round_trip(client, booking_data):
    created = create(client, booking_data)

    assert created.pop("id")
    assert created == booking_data
    assert len(list_bookings(client)) == 1


def test_created_booking_listed_unchanged(client, booking_data):
    created = create(client, booking_data)
    other = create(client, {**booking_data, "name": "Someone Else"})

    assert created["id"] != other["id"]
    assert list_bookings(client) == [created, other]


def test_update_existing(client, booking_data):
    created = create(client, booking_data)
    changes = {**booking_data, "from": "Oslo", "travelDate": "2026-01-15", "numberOfPeople": 4}

    response = call(client, "updateBooking", id=created["id"], input=changes)
    updated = response.json()["data"]["updateBooking"]

    assert updated == {**changes, "id": created["id"]}
    assert list_bookings(client) == [updated]


def test_update_unknown_id_is_null(client, booking_data):
    create(client, booking_data)

    for unknown in (str(ObjectId()), "does-not-exist"):
        response = call(client, "updateBooking", id=unknown, input=booking_data)
        assert response.status_code == 200
        body = response.json()
        assert body["errors"] is None
        assert body["data"] == {"updateBooking": None}

    assert len(list_bookings(client)) == 1


def test_delete_is_idempotent(client, booking_data):
    created = create(client, booking_data)

    for _ in range(2):
        response = call(client, "deleteBooking", id=created["id"])
        assert response.status_code == 200
        assert response.json()["data"] == {"deleteBooking": created["id"]}
        assert list_bookings(client) == []


def test_delete_unknown_id_echoes_id(client):
    response = call(client, "deleteBooking", id="nothing-here")
    assert response.json()["data"] == {"deleteBooking": "nothing-here"}


def test_list_reflects_net_effect(client, booking_data):
    a = create(client, {**booking_data, "name": "A"})
    b = create(client, {**booking_data, "name": "B"})
    c = create(client, {**booking_data, "name": "C"})
    call(client, "deleteBooking", id=b["id"])
    call(client, "updateBooking", id=c["id"], input={**booking_data, "name": "C2"})
    d = create(client, {**booking_data, "name": "D"})
    call(client, "deleteBooking", id=a["id"])

    assert [(x["id"], x["name"]) for x in list_bookings(client)] == [(c["id"], "C2"), (d["id"], "D")]


@pytest.mark.parametrize("field", ["name", "email", "from", "to", "travelDate", "time", "gender", "numberOfPeople"])
def test_missing_field_rejected_before_resolver(client, booking_data, field):
    incomplete = {k: v for k, v in booking_data.items() if k != field}

    with patch("app.services.booking_service.BookingResolvers.resolve", new_callable=AsyncMock) as mock_resolve:
        response = call(client, "createBooking", input=incomplete)

    assert response.status_code == 400
    body = response.json()
    assert body["data"] is None
    assert body["errors"][0]["type"] == "VALIDATION_ERROR"
    assert body["errors"][0]["operation"] == "createBooking"
    assert any(field in err["loc"] for err in body["errors"][0]["detail"])
    mock_resolve.assert_not_called()


@pytest.mark.parametrize("field, value", [
    ("numberOfPeople", "3"),
    ("numberOfPeople", 2.5),
    ("numberOfPeople", True),
    ("name", 5),
    ("travelDate", None),
])
def test_wrong_type_rejected(client, booking_data, fake_db, field, value):
    response = call(client, "createBooking", input={**booking_data, field: value})

    assert response.status_code == 400
    assert response.json()["errors"][0]["type"] == "VALIDATION_ERROR"
    assert fake_db.bookings.documents == []


def test_client_supplied_id_rejected_on_create(client, booking_data):
    response = call(client, "createBooking", input={**booking_data, "id": "abc"})
    assert response.status_code == 400


def test_update_requires_id(client, booking_data):
    response = call(client, "updateBooking", input=booking_data)
    assert response.status_code == 400


def test_unknown_operation(client):
    response = client.post(URL, json={"operation": "dropEverything"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["type"] == "VALIDATION_ERROR"


def test_malformed_json(client):
    response = client.post(URL, content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["type"] == "BAD_REQUEST"


def test_store_failure_is_reported_with_detail(client):
    with patch("app.services.booking_store.BookingStore.find_all", new_callable=AsyncMock) as mock_find:
        mock_find.side_effect = RuntimeError("connection reset by peer")
        response = call(client, "getBookings")

    assert response.status_code == 200
    body = response.json()
    assert body["data"] is None
    error = body["errors"][0]
    assert error["message"] == "connection reset by peer"
    assert error["type"] == "RuntimeError"
    assert error["operation"] == "getBookings"
    assert "connection reset by peer" in error["detail"]


def test_contract_version_header(client):
    response = client.post(URL, json={"operation": "getBookings"}, headers={CONTRACT_VERSION_HEADER: "0"})
    assert response.status_code == 200
    assert response.headers[CONTRACT_VERSION_HEADER] == CONTRACT_VERSION


def test_lifespan_closes_database(fake_db, test_settings):
    with TestClient(create_app(test_settings, database=fake_db)):
        assert fake_db.connected
    assert fake_db.closed


def test_missing_mongo_uri_is_fatal():
    app = create_app(Settings(_env_file=None, MONGO_URI=None))

    with pytest.raises(ConfigurationError):
        with TestClient(app):
            pass


def test_failed_connection_is_fatal(test_settings, fake_db):
    fake_db.connect = AsyncMock(side_effect=StoreConnectionError("no route to host"))
    app = create_app(test_settings, database=fake_db)

    with pytest.raises(StoreConnectionError):
        with TestClient(app):
            pass


def test_unhandled_error_returns_contract_shaped_500(fake_db, test_settings):
    app = create_app(test_settings, database=fake_db)

    with patch("app.api.operations.serialize_result", side_effect=RuntimeError("cannot serialize")):
        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = call(test_client, "getBookings")

    assert response.status_code == 500
    body = response.json()
    assert body["data"] is None
    assert body["errors"][0]["type"] == "RuntimeError"
    assert body["errors"][0]["message"] == "cannot serialize"


def test_run_exits_without_mongo_uri():
    with patch("app.main.settings") as mock_settings, patch("uvicorn.run") as mock_uvicorn:
        mock_settings.MONGO_URI = None
        with pytest.raises(SystemExit) as exc_info:
            run()

    assert exc_info.value.code == 1
    mock_uvicorn.assert_not_called()


def test_run_starts_uvicorn_when_configured():
    with patch("app.main.settings") as mock_settings, patch("uvicorn.run") as mock_uvicorn:
        mock_settings.MONGO_URI = "mongodb://db:27017"
        mock_settings.PORT = 4100
        run()

    mock_uvicorn.assert_called_once_with("app.main:app", host="0.0.0.0", port=4100)
