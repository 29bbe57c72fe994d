from bson.objectid import ObjectId


def day_cell(heatmap: dict, day: str) -> dict:
    for month in heatmap["months"]:
        for cell in month["days"]:
            if cell["type"] == "day" and cell["date"] == day:
                return cell
    raise AssertionError(f"{day} not in grid")


class TestAuth:
    def test_requests_without_token_are_rejected(self, api):
        assert api.get("/api/tasks").status_code == 401
        assert api.get("/api/habits", headers={"Authorization": "Bearer nonsense"}).status_code == 401

    def test_register_login_and_profile(self, api):
        res = api.post("/api/auth/register", json={"username": "ada", "password": "correct-horse"})
        assert res.status_code == 201
        assert res.json()["username"] == "ada"

        res = api.post("/api/auth/login", json={"username": "ada", "password": "correct-horse"})
        assert res.status_code == 200
        headers = {"Authorization": f"Bearer {res.json()['token']}"}

        res = api.put("/api/auth/profile", json={"bio": "builder", "skills": ["python"]}, headers=headers)
        assert res.status_code == 200
        me = api.get("/api/auth/me", headers=headers).json()
        assert me["bio"] == "builder"
        assert me["skills"] == ["python"]

    def test_duplicate_username_and_bad_password(self, api):
        api.post("/api/auth/register", json={"username": "ada", "password": "correct-horse"})
        dup = api.post("/api/auth/register", json={"username": "ada", "password": "another-one"})
        assert dup.status_code == 400
        assert dup.json()["error_type"] == "username_taken"

        res = api.post("/api/auth/login", json={"username": "ada", "password": "wrong-password"})
        assert res.status_code == 401
        assert res.json()["error_type"] == "authentication_error"

    def test_short_password_is_rejected(self, api):
        res = api.post("/api/auth/register", json={"username": "ada", "password": "short"})
        assert res.status_code == 422


class TestTasks:
    def test_create_list_update_delete(self, api, alice, today):
        res = api.post("/api/tasks", json={"text": "Write report", "date": today, "time": "09:30"}, headers=alice)
        assert res.status_code == 201
        task = res.json()
        assert task["category"] == "work"
        assert task["completed"] is False

        res = api.put(f"/api/tasks/{task['id']}", json={"completed": True}, headers=alice)
        assert res.json()["completed"] is True

        tasks = api.get("/api/tasks", headers=alice).json()
        assert [t["id"] for t in tasks] == [task["id"]]

        assert api.delete(f"/api/tasks/{task['id']}", headers=alice).status_code == 200
        assert api.get("/api/tasks", headers=alice).json() == []

    def test_blank_text_is_rejected(self, api, alice):
        res = api.post("/api/tasks", json={"text": "   "}, headers=alice)
        assert res.status_code == 400
        assert res.json()["error_type"] == "validation_error"

    def test_tasks_sorted_by_date_then_time(self, api, alice):
        for text, day, time in [("c", "2024-06-02", "08:00"), ("b", "2024-06-01", "12:00"), ("a", "2024-06-01", "07:00")]:
            api.post("/api/tasks", json={"text": text, "date": day, "time": time}, headers=alice)
        assert [t["text"] for t in api.get("/api/tasks", headers=alice).json()] == ["a", "b", "c"]

    def test_copy_to_today_is_persisted(self, api, alice):
        original = api.post("/api/tasks", json={
            "text": "Review PRs", "date": "2024-06-01", "completed": True, "custom_list": "Startup",
        }, headers=alice).json()

        res = api.post(f"/api/tasks/{original['id']}/copy", json={"date": "2024-06-03"}, headers=alice)
        assert res.status_code == 201
        copy = res.json()
        assert copy["id"] != original["id"]
        assert copy["date"] == "2024-06-03"
        assert copy["completed"] is False
        assert copy["custom_list"] == "Startup"

        stored = {t["id"] for t in api.get("/api/tasks", headers=alice).json()}
        assert stored == {original["id"], copy["id"]}

    def test_clear_custom_list_keeps_tasks(self, api, alice):
        for text in ("one", "two"):
            api.post("/api/tasks", json={"text": text, "custom_list": "College"}, headers=alice)
        api.post("/api/tasks", json={"text": "three", "custom_list": "Startup"}, headers=alice)

        res = api.delete("/api/tasks/list/College", headers=alice)
        assert res.json()["updated"] == 2

        lists = sorted(t["custom_list"] or "" for t in api.get("/api/tasks", headers=alice).json())
        assert lists == ["", "", "Startup"]

    def test_foreign_and_unknown_tasks(self, api, alice, bob):
        task = api.post("/api/tasks", json={"text": "mine"}, headers=alice).json()
        assert api.put(f"/api/tasks/{task['id']}", json={"completed": True}, headers=bob).status_code == 403
        assert api.delete(f"/api/tasks/{task['id']}", headers=bob).status_code == 403
        assert api.delete(f"/api/tasks/{ObjectId()}", headers=alice).status_code == 404


class TestJournals:
    def test_second_daily_entry_updates_the_first(self, api, alice):
        first = api.post("/api/journals", json={"date": "2024-06-01", "content": "draft"}, headers=alice)
        assert first.status_code == 201
        second = api.post("/api/journals", json={"date": "2024-06-01", "content": "final", "title": "Day"}, headers=alice)
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]

        entries = api.get("/api/journals", headers=alice).json()
        assert len(entries) == 1
        assert entries[0]["content"] == "final"
        assert entries[0]["title"] == "Day"

    def test_non_daily_entries_may_share_a_date(self, api, alice):
        api.post("/api/journals", json={"date": "2024-06-01", "content": "a", "type": "code"}, headers=alice)
        api.post("/api/journals", json={"date": "2024-06-01", "content": "b", "type": "code"}, headers=alice)
        assert len(api.get("/api/journals", headers=alice).json()) == 2

    def test_missing_title_gets_default(self, api, alice):
        entry = api.post("/api/journals", json={"date": "2024-06-01", "content": "x"}, headers=alice).json()
        assert entry["title"] == "Untitled Entry"

    def test_bulk_import_counts_failures(self, api, alice):
        rows = [{"date": f"2024-05-{day:02d}", "title": f"Day {day}", "content": f"notes {day}"}
                for day in range(1, 11)]
        rows[3]["content"] = ""
        del rows[7]["content"]

        res = api.post("/api/journals/bulk", json=rows, headers=alice)
        assert res.status_code == 200
        body = res.json()
        assert body["imported"] == 8
        assert body["failed"] == 2
        assert sorted(e["index"] for e in body["errors"]) == [3, 7]
        assert len(api.get("/api/journals", headers=alice).json()) == 8

    def test_bulk_import_rejects_existing_daily_dates(self, api, alice):
        api.post("/api/journals", json={"date": "2024-05-01", "content": "already"}, headers=alice)
        body = api.post("/api/journals/bulk", json=[
            {"date": "2024-05-01", "content": "dup"},
            {"date": "2024-05-02", "content": "new"},
        ], headers=alice).json()
        assert body["imported"] == 1
        assert body["failed"] == 1


class TestFocus:
    def test_daily_totals_include_breaks(self, api, alice):
        for minutes, mode in [(25, "focus"), (20, "focus"), (5, "break")]:
            res = api.post("/api/focus", json={"duration": minutes, "mode": mode, "date": "2024-06-01"}, headers=alice)
            assert res.status_code == 201
        api.post("/api/focus", json={"duration": 50, "date": "2024-06-02"}, headers=alice)

        days = api.get("/api/focus", headers=alice).json()
        assert days == [
            {"date": "2024-06-02", "total_minutes": 50, "sessions": 1},
            {"date": "2024-06-01", "total_minutes": 50, "sessions": 3},
        ]

        focus_only = api.get("/api/focus", params={"mode": "focus"}, headers=alice).json()
        assert focus_only[1] == {"date": "2024-06-01", "total_minutes": 45, "sessions": 2}

    def test_break_minutes_feed_the_focus_heatmap(self, api, alice):
        for minutes, mode in [(25, "focus"), (5, "break")]:
            api.post("/api/focus", json={"duration": minutes, "mode": mode, "date": "2024-06-01"}, headers=alice)
        body = api.get("/api/heatmap", params={"mode": "focus", "today": "2024-06-15"}, headers=alice).json()
        assert body["total"] == 30

    def test_sounds(self, api, alice, bob):
        sound = api.post("/api/focus/sounds", json={"label": "Rain", "url": "https://youtu.be/x"}, headers=alice).json()
        assert sound["type"] == "youtube"
        assert [s["label"] for s in api.get("/api/focus/sounds", headers=alice).json()] == ["Rain"]
        assert api.delete(f"/api/focus/sounds/{sound['id']}", headers=bob).status_code == 403
        assert api.delete(f"/api/focus/sounds/{sound['id']}", headers=alice).status_code == 200

    def test_sound_url_must_be_http(self, api, alice):
        resp = api.post("/api/focus/sounds", json={"label": "Rain", "url": "not a link"}, headers=alice)
        assert resp.status_code == 400
        assert resp.json()["error_type"] == "validation_error"


class TestHabitsAndHeatmap:
    def test_read_habit_toggle_scenario(self, api, alice, today):
        habit = api.post("/api/habits", json={"name": "Read"}, headers=alice).json()
        assert habit["color"] == "emerald"
        assert habit["completed_dates"] == []

        res = api.put(f"/api/habits/{habit['id']}/toggle", json={"date": today}, headers=alice)
        assert res.json()["completed_dates"] == [today]

        params = {"mode": "habit", "habit_id": habit["id"], "today": today}
        heatmap = api.get("/api/heatmap", params=params, headers=alice).json()
        assert heatmap["label"] == "Days"
        assert heatmap["total"] == 1
        assert day_cell(heatmap, today) == {"type": "day", "id": today, "date": today, "count": 1, "level": 4}

        res = api.put(f"/api/habits/{habit['id']}/toggle", json={"date": today}, headers=alice)
        assert res.json()["completed_dates"] == []
        heatmap = api.get("/api/heatmap", params=params, headers=alice).json()
        assert heatmap["total"] == 0
        cell = day_cell(heatmap, today)
        assert (cell["count"], cell["level"]) == (0, 0)

    def test_future_toggle_is_rejected_without_change(self, api, alice):
        habit = api.post("/api/habits", json={"name": "Read"}, headers=alice).json()
        res = api.put(f"/api/habits/{habit['id']}/toggle", json={"date": "2999-01-01"}, headers=alice)
        assert res.status_code == 422
        assert res.json()["error_type"] == "future_date"
        assert api.get("/api/habits", headers=alice).json()[0]["completed_dates"] == []

    def test_malformed_toggle_date(self, api, alice):
        habit = api.post("/api/habits", json={"name": "Read"}, headers=alice).json()
        res = api.put(f"/api/habits/{habit['id']}/toggle", json={"date": "06/01/2024"}, headers=alice)
        assert res.status_code == 400

    def test_blank_habit_name(self, api, alice):
        assert api.post("/api/habits", json={"name": "  "}, headers=alice).status_code == 400

    def test_habits_are_owner_scoped(self, api, alice, bob, today):
        habit = api.post("/api/habits", json={"name": "Read"}, headers=alice).json()
        assert api.put(f"/api/habits/{habit['id']}/toggle", json={"date": today}, headers=bob).status_code == 403
        assert api.delete(f"/api/habits/{habit['id']}", headers=bob).status_code == 403
        assert api.get("/api/habits", headers=bob).json() == []
        assert api.get("/api/heatmap", params={"mode": "habit", "habit_id": habit["id"]}, headers=bob).status_code == 403

    def test_delete_unknown_habit(self, api, alice):
        assert api.delete(f"/api/habits/{ObjectId()}", headers=alice).status_code == 404
        assert api.delete("/api/habits/not-an-id", headers=alice).status_code == 404

    def test_delete_habit_leaves_other_records(self, api, alice):
        habit = api.post("/api/habits", json={"name": "Read"}, headers=alice).json()
        api.post("/api/tasks", json={"text": "keep me"}, headers=alice)
        assert api.delete(f"/api/habits/{habit['id']}", headers=alice).status_code == 200
        assert api.get("/api/habits", headers=alice).json() == []
        assert len(api.get("/api/tasks", headers=alice).json()) == 1

    def test_overview_scores_task_and_journal(self, api, alice, today):
        api.post("/api/tasks", json={"text": "ship", "date": today, "completed": True}, headers=alice)
        api.post("/api/journals", json={"date": today, "content": "shipped"}, headers=alice)

        heatmap = api.get("/api/heatmap", params={"mode": "overview", "today": today}, headers=alice).json()
        assert heatmap["label"] == "Score"
        assert day_cell(heatmap, today)["count"] == 4
        assert heatmap["total"] == 4

    def test_focus_heatmap_shading(self, api, alice, today):
        api.post("/api/focus", json={"duration": 45, "date": today}, headers=alice)
        heatmap = api.get("/api/heatmap", params={"mode": "focus", "today": today}, headers=alice).json()
        assert heatmap["label"] == "Minutes"
        assert day_cell(heatmap, today)["level"] == 2

    def test_legacy_all_mode_and_unknown_mode(self, api, alice, today):
        res = api.get("/api/heatmap", params={"mode": "all", "today": today}, headers=alice)
        assert res.status_code == 200
        assert len(res.json()["months"]) == 12

        res = api.get("/api/heatmap", params={"mode": "weekly"}, headers=alice)
        assert res.status_code == 422
        assert res.json()["error_type"] == "validation_error"


def test_health_is_public(api):
    res = api.get("/api/health")
    assert res.status_code == 200
    assert set(res.json()) == {"status", "mongodb", "version"}
