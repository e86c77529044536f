from datetime import date, datetime

from roombook.services.recurrence import add_months, day_of_week, expand, occurrence_interval


def test_weekly_excludes_anchor_and_includes_end_date():
    dates = expand(date(2024, 1, 1), 'weekly', end_date=date(2024, 1, 29))
    assert dates == [date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22), date(2024, 1, 29)]

def test_custom_days_of_week():
    # 1 = Monday, 3 = Wednesday
    dates = expand(date(2024, 3, 1), 'custom', end_date=date(2024, 3, 14), days_of_week=[1, 3])
    assert dates == [date(2024, 3, 4), date(2024, 3, 6), date(2024, 3, 11), date(2024, 3, 13)]

def test_custom_without_days_is_empty():
    assert expand(date(2024, 3, 1), 'custom', end_date=date(2024, 3, 14), days_of_week=[]) == []

def test_daily_default_horizon_is_three_months():
    dates = expand(date(2024, 1, 1), 'daily')
    assert dates[0] == date(2024, 1, 2)
    assert dates[-1] == date(2024, 4, 1)
    assert len(dates) == 91

def test_monthly_skips_months_without_the_day():
    dates = expand(date(2024, 1, 31), 'monthly', end_date=date(2024, 6, 30))
    assert dates == [date(2024, 3, 31), date(2024, 5, 31)]

def test_zero_length_window_is_empty():
    assert expand(date(2024, 1, 1), 'daily', end_date=date(2024, 1, 1)) == []

def test_unknown_kind_is_empty():
    assert expand(date(2024, 1, 1), 'none', end_date=date(2024, 2, 1)) == []

def test_expand_is_restartable():
    first = expand(date(2024, 1, 1), 'weekly', end_date=date(2024, 2, 1))
    second = expand(date(2024, 1, 1), 'weekly', end_date=date(2024, 2, 1))
    assert first == second

def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2024, 1, 7)) == 0  # Sunday
    assert day_of_week(date(2024, 1, 8)) == 1  # Monday

def test_add_months_clamps_short_months():
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)

def test_occurrence_keeps_local_wall_clock_across_dst():
    # 09:00 in Paris is 08:00 UTC in winter, 07:00 UTC in summer
    anchor_start = datetime(2024, 3, 25, 8, 0)
    anchor_end = datetime(2024, 3, 25, 9, 30)
    start, end = occurrence_interval(date(2024, 4, 1), anchor_start, anchor_end, 'Europe/Paris')
    assert start == datetime(2024, 4, 1, 7, 0)
    assert end == datetime(2024, 4, 1, 8, 30)

def test_limit_stops_expansion_early():
    dates = expand(date(2024, 1, 1), 'daily', end_date=date(9999, 12, 31), limit=50)
    assert len(dates) == 51
    assert dates[-1] == date(2024, 2, 21)

def test_expansion_stops_at_last_representable_day():
    assert expand(date(9999, 12, 30), 'daily', end_date=date(9999, 12, 31)) == [date(9999, 12, 31)]
