def _entry(entry_id, timestamp, **overrides):
    payload = {
        "id": entry_id,
        "subjectType": "asset",
        "subjectId": "asset-1",
        "action": "STATUS_CHANGED",
        "actor": "lead@example.com",
        "timestamp": timestamp,
        "fromStatus": "TO_REVIEW",
        "toStatus": "APPROVED",
        "comment": "",
    }
    payload.update(overrides)
    return payload


class TestActivityEndpoints:
    def test_save_and_list_newest_first(self, client, auth_headers):
        resp = client.post(
            "/api/activity",
            json={
                "activity": [
                    _entry("activity-1", "2025-01-01T09:00:00+00:00"),
                    _entry("activity-2", "2025-01-02T09:00:00+00:00", action="COMMENT"),
                ]
            },
            headers=auth_headers,
        )
        assert resp.status_code == 200

        rows = client.get("/api/activity", headers=auth_headers).json()["activity"]
        assert [row["id"] for row in rows] == ["activity-2", "activity-1"]
        assert rows[1]["from_status"] == "TO_REVIEW"
        assert rows[1]["subject_type"] == "asset"

    def test_save_empty_batch(self, client, auth_headers):
        resp = client.post("/api/activity", json={"activity": []}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "No activity provided."

    def test_rejects_unknown_action(self, client, auth_headers):
        resp = client.post(
            "/api/activity",
            json={"activity": [_entry("activity-1", "2025-01-01T09:00:00Z", action="LIKED")]},
            headers=auth_headers,
        )
        assert resp.status_code == 422
