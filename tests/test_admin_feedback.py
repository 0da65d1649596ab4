from datetime import datetime, timedelta, timezone
from io import BytesIO

import pandas as pd

from feedback_app.models import FeedbackEntry
from feedback_app.services.storage import DatabaseStore
from helpers import VALID, read_file_store, write_file_store

BASE = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
TOPICS = ["AI in HR", "People intelligence", "AI in HR", "All of the above",
          "Skill Based Organization", "AI in HR", "People intelligence"]


def _seed_db(app, n=len(TOPICS)):
    ids = []
    with app.app_context():
        store = DatabaseStore()
        for i in range(n):
            entry = FeedbackEntry(
                name=f"User {i}",
                email=f"user{i}@example.com",
                job_title="Analyst",
                company_name="Acme",
                topic=TOPICS[i],
                phone="555-0100" if i % 2 else None,
                submitted_at=BASE + timedelta(hours=i),
                ip_address="10.0.0.1",
            )
            ids.append(store.add(entry).value)
    return ids


def test_list_is_newest_first(app, client):
    ids = _seed_db(app)
    rows = client.get("/admin/feedback").get_json()
    assert [r["_id"] for r in rows] == list(reversed(ids))
    stamps = [r["submittedAt"] for r in rows]
    assert stamps == sorted(stamps, reverse=True)
    assert rows[0]["submittedAt"] == "2024-05-01T15:30:00.000Z"


def test_delete_existing_then_again(app, client):
    ids = _seed_db(app, 3)
    resp = client.delete(f"/admin/feedback/{ids[1]}")
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Feedback deleted successfully", "id": ids[1]}

    remaining = [r["_id"] for r in client.get("/admin/feedback").get_json()]
    assert ids[1] not in remaining
    assert len(remaining) == 2

    assert client.delete(f"/admin/feedback/{ids[1]}").status_code == 404


def test_delete_unknown_is_404(client):
    resp = client.delete("/admin/feedback/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Feedback not found"}


def test_stats_match_list(app, client):
    _seed_db(app)
    stats = client.get("/admin/feedback/stats").get_json()
    rows = client.get("/admin/feedback").get_json()

    assert stats["total"] == len(rows) == len(TOPICS)
    assert sum(b["count"] for b in stats["topicBreakdown"]) == stats["total"]
    assert stats["topicBreakdown"][0] == {"_id": "AI in HR", "count": 3}

    recent = stats["recent"]
    assert len(recent) == 5
    assert [r["name"] for r in recent] == ["User 6", "User 5", "User 4", "User 3", "User 2"]
    assert set(recent[0]) == {"name", "email", "topic", "submittedAt"}


def test_stats_empty(client):
    assert client.get("/admin/feedback/stats").get_json() == {
        "total": 0, "topicBreakdown": [], "recent": [],
    }


def test_export_workbook(app, client):
    _seed_db(app, 4)
    resp = client.get("/admin/feedback/export")
    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    disposition = resp.headers["Content-Disposition"]
    assert "attachment" in disposition
    assert f"feedback-export-{datetime.now(timezone.utc).date().isoformat()}.xlsx" in disposition

    df = pd.read_excel(BytesIO(resp.data), sheet_name="Feedback Data", keep_default_na=False)
    assert list(df.columns) == [
        "Name", "Email", "Phone", "Job Title", "Company Name", "Topic of Interest",
        "Reason for Contact", "Submitted At", "IP Address",
    ]
    assert len(df) == len(client.get("/admin/feedback").get_json())
    assert df.iloc[0]["Name"] == "User 3"
    assert df.iloc[0]["Submitted At"] == "5/1/2024, 12:30:00 PM"
    assert (df["Reason for Contact"] == "N/A").all()
    assert df.iloc[1]["Phone"] == "N/A"
    assert df.iloc[0]["Phone"] == "555-0100"


def test_export_empty_has_header_row(client):
    resp = client.get("/admin/feedback/export")
    df = pd.read_excel(BytesIO(resp.data), keep_default_na=False)
    assert len(df) == 0
    assert "Topic of Interest" in df.columns


def test_file_store_list_stats_and_delete(offline_app, offline_client):
    write_file_store(offline_app, [
        {**VALID, "id": "1714555800000", "submittedAt": "2024-05-01T09:30:00.000Z"},
        {**VALID, "_id": "665a1f0c9d3e2b0012345678", "name": "Legacy",
         "submittedAt": "2024-05-02T09:30:00.000Z"},
        {**VALID, "id": "1714728600000", "topic": "People intelligence",
         "submittedAt": "2024-05-03T09:30:00.000Z"},
    ])

    rows = offline_client.get("/admin/feedback").get_json()
    assert [r["id"] for r in rows] == ["1714728600000", "665a1f0c9d3e2b0012345678", "1714555800000"]

    stats = offline_client.get("/admin/feedback/stats").get_json()
    assert stats["total"] == 3
    assert {b["_id"]: b["count"] for b in stats["topicBreakdown"]} == {
        "AI in HR": 2, "People intelligence": 1,
    }

    # Database-style identifier is matched in the file store too
    assert offline_client.delete("/admin/feedback/665a1f0c9d3e2b0012345678").status_code == 200
    assert offline_client.delete("/admin/feedback/1714555800000").status_code == 200
    assert offline_client.delete("/admin/feedback/1714555800000").status_code == 404
    assert [r["id"] for r in read_file_store(offline_app)] == ["1714728600000"]


def test_file_store_export_row_count(offline_app, offline_client):
    write_file_store(offline_app, [
        {**VALID, "id": "1", "submittedAt": "2024-05-01T09:30:00.000Z"},
        {**VALID, "id": "2", "reason": "Pricing", "submittedAt": "2024-05-02T09:30:00.000Z"},
    ])
    resp = offline_client.get("/admin/feedback/export")
    df = pd.read_excel(BytesIO(resp.data), keep_default_na=False)
    assert len(df) == 2
    assert df.iloc[0]["Reason for Contact"] == "Pricing"
    assert df.iloc[1]["Reason for Contact"] == "N/A"


def test_legacy_admin_prefix(app, client):
    _seed_db(app, 2)
    assert len(client.get("/api/feedback").get_json()) == 2
    assert client.get("/api/feedback/stats").get_json()["total"] == 2


def test_health_reports_active_store(client, offline_client):
    assert client.get("/api/health").get_json() == {
        "status": "OK", "message": "Server is running", "storage": "database",
    }
    assert offline_client.get("/api/health").get_json()["storage"] == "file"


def test_unknown_route_is_json_404(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Route not found"}


def test_file_store_delete_mixed_record_by_generic_id(offline_app, offline_client):
    write_file_store(offline_app, [
        {**VALID, "_id": "665a1f0c9d3e2b0012345678", "id": "1714555800000",
         "submittedAt": "2024-05-01T09:30:00.000Z"},
        {**VALID, "id": "1714642200000", "submittedAt": "2024-05-02T09:30:00.000Z"},
    ])

    rows = offline_client.get("/admin/feedback").get_json()
    assert rows[1]["_id"] == "665a1f0c9d3e2b0012345678"
    assert rows[1]["id"] == "1714555800000"

    resp = offline_client.delete("/admin/feedback/1714555800000")
    assert resp.status_code == 200
    assert [r["id"] for r in read_file_store(offline_app)] == ["1714642200000"]
    assert offline_client.delete("/admin/feedback/665a1f0c9d3e2b0012345678").status_code == 404


def test_file_store_stats_recent_is_newest_five(offline_app, offline_client):
    write_file_store(offline_app, [
        {**VALID, "id": str(i), "name": f"User {i}", "topic": TOPICS[i],
         "submittedAt": (BASE + timedelta(hours=i)).isoformat()}
        for i in (3, 0, 6, 1, 5, 2, 4)
    ])

    stats = offline_client.get("/admin/feedback/stats").get_json()
    assert stats["total"] == 7
    assert sum(b["count"] for b in stats["topicBreakdown"]) == 7
    assert stats["topicBreakdown"][0] == {"_id": "AI in HR", "count": 3}
    assert [r["name"] for r in stats["recent"]] == ["User 6", "User 5", "User 4", "User 3", "User 2"]
    assert set(stats["recent"][0]) == {"name", "email", "topic", "submittedAt"}
