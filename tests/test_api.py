from io import BytesIO
from pathlib import Path

import pandas as pd
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from backend.main import app, get_session
from backend.models import VehicleRow
from backend.seed import seed_vehicles
from inspection_core.src.models import VehicleType

SEED_CSV = Path(__file__).resolve().parent.parent / "backend" / "data" / "default_vehicles.csv"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_vehicles(session, SEED_CSV)
    return engine


@pytest.fixture
def client(engine):
    def _session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _results(catalog, vehicle_type, failing=()):
    return [
        {"itemId": item.id, "status": "NOK" if item.id in failing else "OK"}
        for item in catalog.items_for(vehicle_type)
    ]


def _submit(client, catalog, fleet_number="2401", vehicle_type=VehicleType.BUS, failing=(), date=None, **extra):
    body = {
        "fleetNumber": fleet_number,
        "inspectorName": "Rui Costa",
        "results": _results(catalog, vehicle_type, failing),
        **extra,
    }
    if date:
        body["date"] = date
    return client.post("/inspections", json=body)


def test_checklist_endpoint(client):
    resp = client.get("/checklists/TRAM")
    assert resp.status_code == 200
    assert [i["id"] for i in resp.json()] == ["t1", "t2", "t3", "t4", "t5", "t6"]
    assert client.get("/checklists/FERRY").status_code == 422


def test_vehicles_seeded(client):
    resp = client.get("/vehicles")
    assert resp.status_code == 200
    vehicles = {v["fleet_number"]: v for v in resp.json()}
    assert set(vehicles) == {"2401", "2402", "505", "2983"}
    assert vehicles["505"]["type"] == "TRAM"
    assert vehicles["2983"]["last_inspection_date"] == ""


def test_create_inspection_copies_catalog_labels(client, catalog, engine):
    resp = _submit(client, catalog, failing={"b7"}, date="2023-10-27T09:30:00Z", aiSummary="Ruído no motor.")
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "NOK"
    assert body["vehicle"]["fleet_number"] == "2401"
    failing = [r for r in body["results"] if r["status"] == "NOK"]
    assert failing == [
        {"item_id": "b7", "category": "Mecânica", "label": "Ruídos Anormais Motor", "status": "NOK", "note": None}
    ]

    with Session(engine) as session:
        assert session.get(VehicleRow, "2401").last_inspection_date == "2023-10-27"


def test_older_inspection_keeps_last_date(client, catalog, engine):
    assert _submit(client, catalog, fleet_number="2402", date="2023-10-01T10:00:00").status_code == 201
    with Session(engine) as session:
        assert session.get(VehicleRow, "2402").last_inspection_date == "2023-10-26"


def test_create_inspection_unknown_vehicle(client, catalog):
    assert _submit(client, catalog, fleet_number="9999").status_code == 404


def test_create_inspection_missing_item(client, catalog):
    body = {
        "fleetNumber": "505",
        "inspectorName": "Rui Costa",
        "results": _results(catalog, VehicleType.TRAM)[:-1],
    }
    resp = client.post("/inspections", json=body)
    assert resp.status_code == 422
    assert resp.json()["detail"]["missing_ids"] == ["t6"]
    assert client.get("/inspections").json() == []


def test_create_inspection_wrong_checklist(client, catalog):
    resp = _submit(client, catalog, fleet_number="505", vehicle_type=VehicleType.BUS)
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert len(detail["unknown_ids"]) == 10
    assert len(detail["missing_ids"]) == 6


def test_history_filtered_and_newest_first(client, catalog):
    _submit(client, catalog, date="2023-10-20T08:00:00Z", failing={"b1"})
    _submit(client, catalog, fleet_number="2402", date="2023-10-25T15:00:00Z")
    _submit(client, catalog, fleet_number="505", vehicle_type=VehicleType.TRAM, date="2023-10-26T07:00:00Z", failing={"t2"})

    everything = client.get("/inspections").json()
    assert [i["vehicle"]["fleet_number"] for i in everything] == ["505", "2402", "2401"]
    assert [i["status"] for i in everything] == ["NOK", "OK", "NOK"]

    ranged = client.get("/inspections", params={"start": "2023-10-21", "end": "2023-10-26"}).json()
    assert [i["vehicle"]["fleet_number"] for i in ranged] == ["505", "2402"]


def test_history_rejects_bad_bound(client):
    resp = client.get("/inspections", params={"start": "2023-02-30"})
    assert resp.status_code == 400
    assert "Invalid date bound" in resp.json()["detail"]


def test_dashboard(client, catalog):
    assert client.get("/dashboard").json()["total"] == 0

    _submit(client, catalog, date="2023-10-20T08:00:00Z", failing={"b1", "b9"})
    _submit(client, catalog, fleet_number="2402", date="2023-10-25T15:00:00Z")
    _submit(client, catalog, fleet_number="2983", date="2023-10-26T15:00:00Z", failing={"b9"})

    stats = client.get("/dashboard").json()
    assert stats["total"] == 3
    assert stats["ok_count"] == 1
    assert stats["nok_count"] == 2
    assert stats["category_issue_counts"] == {"Segurança": 3}
    assert [a["vehicle"]["fleet_number"] for a in stats["recent_alerts"]] == ["2983", "2401"]

    ranged = client.get("/dashboard", params={"start": "2023-10-21", "limit": 0}).json()
    assert ranged["total"] == 2
    assert ranged["recent_alerts"] == []


def test_alerts_feed(client, catalog):
    for day in range(1, 8):
        _submit(client, catalog, date=f"2023-10-0{day}T10:00:00Z", failing={"b5"})
    alerts = client.get("/alerts").json()
    assert len(alerts) == 5
    assert alerts[0]["date"].startswith("2023-10-07")
    assert alerts[0]["failed_results"][0]["label"] == "Validadores de Bilhetes"


def test_export_csv_and_xlsx(client, catalog):
    _submit(client, catalog, date="2023-10-20T08:00:00Z", failing={"b1"})

    csv_resp = client.get("/export")
    assert csv_resp.status_code == 200
    assert csv_resp.headers["content-type"].startswith("text/csv")
    assert csv_resp.text.splitlines()[0].startswith("inspection_id,fleet_number")
    assert len(csv_resp.text.strip().splitlines()) == 11

    xlsx_resp = client.get("/export", params={"format": "xlsx"})
    assert xlsx_resp.status_code == 200
    df = pd.read_excel(BytesIO(xlsx_resp.content), engine="openpyxl")
    assert len(df) == 10

    assert client.get("/export", params={"format": "pdf"}).status_code == 422


def test_reseed_keeps_newer_last_inspection(engine):
    with Session(engine) as session:
        row = session.get(VehicleRow, "2401")
        row.last_inspection_date = "2024-05-01"
        session.add(row)
        session.commit()

    with Session(engine) as session:
        assert seed_vehicles(session, SEED_CSV) == 4

    with Session(engine) as session:
        assert session.get(VehicleRow, "2401").last_inspection_date == "2024-05-01"
        assert session.get(VehicleRow, "2402").last_inspection_date == "2023-10-26"


def test_reseed_takes_date_from_stored_inspections(client, catalog, engine):
    assert _submit(client, catalog, fleet_number="2983", date="2023-11-03T08:00:00Z").status_code == 201
    with Session(engine) as session:
        row = session.get(VehicleRow, "2983")
        row.last_inspection_date = ""
        session.add(row)
        session.commit()

    with Session(engine) as session:
        seed_vehicles(session, SEED_CSV)

    with Session(engine) as session:
        assert session.get(VehicleRow, "2983").last_inspection_date == "2023-11-03"
