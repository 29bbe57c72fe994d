import pytest
from core.exceptions import ValidationError
from data_layer.models.focus_model import FocusDay
from data_layer.models.habit_model import Habit
from data_layer.models.task_model import Task
from services.heatmap import DateWindow, HeatmapRecords, ViewKind, ViewMode, aggregate


def task(day, completed=True, **extra):
    return {"id": f"t-{day}", "text": "t", "date": day, "completed": completed, **extra}


class TestViewMode:
    def test_all_is_an_alias_for_overview(self):
        assert ViewMode.parse("all") == ViewMode.overview()
        assert ViewMode.parse(" Journal ").kind == ViewKind.JOURNAL

    def test_unknown_mode_is_rejected(self):
        with pytest.raises(ValidationError):
            ViewMode.parse("weekly")
        with pytest.raises(ValidationError):
            ViewMode.parse("")

    def test_habit_mode_needs_an_id(self):
        with pytest.raises(ValidationError):
            ViewMode.parse("habit")
        assert ViewMode.parse("habit", "h1") == ViewMode.habit("h1")

    def test_habit_id_is_dropped_for_other_kinds(self):
        assert ViewMode.parse("tasks", "h1").habit_id is None

    def test_every_kind_has_a_policy(self):
        labels = {kind: ViewMode.parse(kind, "h").label for kind in ViewKind}
        assert labels == {
            ViewKind.OVERVIEW: "Score",
            ViewKind.TASKS: "Tasks",
            ViewKind.FOCUS: "Minutes",
            ViewKind.JOURNAL: "Entries",
            ViewKind.HABIT: "Days",
        }


class TestTasksMode:
    def test_counts_completed_tasks_only(self):
        records = {"tasks": [task("2024-06-01"), task("2024-06-01"), task("2024-06-01", completed=False),
                             task("2024-06-02")]}
        result = aggregate(records, ViewMode.tasks())
        assert result.counts_by_date == {"2024-06-01": 2, "2024-06-02": 1}
        assert result.total == 3
        assert result.label == "Tasks"

    def test_skips_missing_and_malformed_dates(self):
        records = {"tasks": [task(None), task(""), task("not-a-day"), task("2024-13-45"), task("2024-06-01")]}
        result = aggregate(records, ViewMode.tasks())
        assert result.counts_by_date == {"2024-06-01": 1}

    def test_time_suffix_keeps_the_stored_day(self):
        records = {"tasks": [task("2024-06-01T23:30:00-08:00"), task("2024-06-01T00:10:00Z")]}
        assert aggregate(records, ViewMode.tasks()).counts_by_date == {"2024-06-01": 2}

    def test_accepts_models(self):
        records = HeatmapRecords(tasks=[Task(user_id="u", text="a", date="2024-06-01", completed=True)])
        assert aggregate(records, ViewMode.tasks()).total == 1


class TestJournalAndFocus:
    def test_journal_entries_count_once_each(self):
        records = {"journals": [{"date": "2024-06-01"}, {"date": "2024-06-01"}, {"title": "no date"}]}
        result = aggregate(records, ViewMode.journal())
        assert result.counts_by_date == {"2024-06-01": 2}
        assert (result.total, result.label) == (2, "Entries")

    def test_focus_sums_minutes(self):
        records = {"focus": [FocusDay(date="2024-06-01", total_minutes=45, sessions=2),
                             {"_id": "2024-06-02", "totalMinutes": 30, "sessions": 1},
                             {"date": "2024-06-03", "total_minutes": "lots"}]}
        result = aggregate(records, ViewMode.focus())
        assert result.counts_by_date == {"2024-06-01": 45, "2024-06-02": 30}
        assert (result.total, result.label) == (75, "Minutes")


class TestOverview:
    def test_task_plus_journal_scores_four(self):
        records = {"tasks": [task("2024-06-01")], "journals": [{"date": "2024-06-01"}]}
        result = aggregate(records, ViewMode.overview())
        assert result.counts_by_date == {"2024-06-01": 4}
        assert (result.total, result.label) == (4, "Score")

    def test_focus_and_habits_are_weighted(self):
        records = {
            "focus": [{"date": "2024-06-01", "total_minutes": 44}, {"date": "2024-06-02", "total_minutes": 10}],
            "habits": [{"id": "h1", "completed_dates": ["2024-06-01", "2024-06-02"]},
                       {"id": "h2", "completed_dates": ["2024-06-01"]}],
        }
        result = aggregate(records, ViewMode.overview())
        # 44 minutes -> 2 points, 10 minutes -> 0 points
        assert result.counts_by_date == {"2024-06-01": 4, "2024-06-02": 1}
        assert result.total == 5


class TestHabitMode:
    def test_only_the_selected_habit(self):
        habits = [Habit(id="h1", user_id="u", name="Read", completed_dates=["2024-06-01", "2024-06-03"]),
                  Habit(id="h2", user_id="u", name="Run", completed_dates=["2024-06-02"])]
        result = aggregate({"habits": habits}, ViewMode.habit("h1"))
        assert result.counts_by_date == {"2024-06-01": 1, "2024-06-03": 1}
        assert (result.total, result.label) == (2, "Days")

    def test_unknown_habit_is_empty(self):
        result = aggregate({"habits": [{"id": "h1", "completed_dates": ["2024-06-01"]}]}, ViewMode.habit("zzz"))
        assert result.counts_by_date == {}
        assert (result.total, result.label) == (0, "Days")


class TestWindow:
    def test_out_of_window_records_never_reach_totals(self):
        window = DateWindow(start="2024-01-01", end="2024-06-15")
        records = {
            "tasks": [task("2023-12-31"), task("2024-06-15"), task("2024-06-16"), task("2030-01-01")],
            "journals": [{"date": "2024-06-20"}],
        }
        result = aggregate(records, ViewMode.overview(), window)
        assert result.counts_by_date == {"2024-06-15": 1}
        assert result.total == 1

    def test_window_rejects_bad_bounds(self):
        with pytest.raises(ValueError):
            DateWindow(start="yesterday", end="2024-06-15")
