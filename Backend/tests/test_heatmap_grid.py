from datetime import date
from services.heatmap import ViewMode, build_grid, build_heatmap, heatmap_window, intensity_level


def days_of(month):
    return [cell for cell in month.days if cell.type == "day"]


class TestGridShape:
    def test_twelve_months_ending_in_current_month(self):
        grid = build_grid({}, ViewMode.overview(), date(2024, 6, 15))
        assert len(grid) == 12
        assert (grid[0].year, grid[0].month) == (2023, 7)
        assert (grid[-1].year, grid[-1].month) == (2024, 6)
        assert [m.name for m in grid[:2]] == ["Jul", "Aug"]

    def test_year_boundary(self):
        grid = build_grid({}, ViewMode.overview(), "2024-01-10")
        assert (grid[0].year, grid[0].month) == (2023, 2)
        assert (grid[-1].year, grid[-1].month) == (2024, 1)

    def test_month_starting_wednesday_has_three_spacers(self):
        grid = build_grid({}, ViewMode.overview(), date(2024, 5, 20))
        may = grid[-1]
        assert date(2024, 5, 1).strftime("%A") == "Wednesday"
        assert may.spacer_count == 3
        assert [cell.id for cell in may.days[:3]] == ["spacer-0", "spacer-1", "spacer-2"]
        assert may.days[3].date == "2024-05-01"

    def test_month_starting_sunday_has_no_spacers(self):
        grid = build_grid({}, ViewMode.overview(), date(2024, 9, 3))
        assert grid[-1].spacer_count == 0

    def test_every_day_of_the_month_is_present(self):
        grid = build_grid({}, ViewMode.overview(), date(2024, 3, 1))
        february = grid[-2]
        assert len(days_of(february)) == 29
        assert days_of(february)[-1].date == "2024-02-29"


class TestLevels:
    def test_default_thresholds(self):
        assert [intensity_level(n) for n in (0, 1, 2, 3, 4, 5, 7, 8, 50)] == [0, 1, 1, 2, 2, 3, 3, 4, 4]

    def test_mode_thresholds_apply(self):
        counts = {"2024-06-01": 45, "2024-06-02": 120, "2024-06-03": 14}
        june = build_grid(counts, ViewMode.focus(), date(2024, 6, 30))[-1]
        levels = {cell.date: cell.level for cell in days_of(june)[:3]}
        assert levels == {"2024-06-01": 2, "2024-06-02": 4, "2024-06-03": 0}

    def test_journal_and_habit_thresholds(self):
        assert intensity_level(1, ViewMode.journal().thresholds) == 2
        assert intensity_level(3, ViewMode.journal().thresholds) == 4
        assert intensity_level(1, ViewMode.habit("h").thresholds) == 4


class TestBuildHeatmap:
    def test_window_starts_at_oldest_month(self):
        window = heatmap_window(date(2024, 6, 15))
        assert (window.start, window.end) == ("2023-07-01", "2024-06-15")

    def test_read_habit_scenario(self):
        habit = {"id": "read", "name": "Read", "completed_dates": ["2024-06-15"]}
        heatmap = build_heatmap({"habits": [habit]}, ViewMode.habit("read"), "2024-06-15")
        cell = next(c for c in days_of(heatmap.months[-1]) if c.date == "2024-06-15")
        assert (cell.count, cell.level) == (1, 4)
        assert (heatmap.total, heatmap.label, heatmap.mode) == (1, "Days", "habit:read")

        habit["completed_dates"] = []
        heatmap = build_heatmap({"habits": [habit]}, ViewMode.habit("read"), "2024-06-15")
        cell = next(c for c in days_of(heatmap.months[-1]) if c.date == "2024-06-15")
        assert (cell.count, cell.level) == (0, 0)
        assert heatmap.total == 0

    def test_future_and_old_records_do_not_count(self):
        tasks = [{"date": "2024-06-16", "completed": True},
                 {"date": "2023-06-30", "completed": True},
                 {"date": "2024-06-15", "completed": True}]
        heatmap = build_heatmap({"tasks": tasks}, ViewMode.tasks(), date(2024, 6, 15))
        assert heatmap.total == 1
