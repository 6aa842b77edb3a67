from datetime import date

from playlist_archive.dates import first_of_month, next_month, resolve_date


def test_resolve_full_caption():
    assert resolve_date("Sunday night 22 November 2020 on ABC 1", date(2020, 11, 1)) == date(2020, 11, 22)
    assert resolve_date("Saturday morning 29th November 2014 on", date(2014, 11, 1)) == date(2014, 11, 29)
    assert resolve_date("31st January 2009 on", date(2009, 1, 1)) == date(2009, 1, 31)


def test_resolve_missing_year_uses_reference_year():
    assert resolve_date("Sunday night 22 November on ABC 1", date(2009, 11, 1)) == date(2009, 11, 22)


def test_resolve_missing_year_rolls_forward():
    assert resolve_date("Sunday night 22 January on ABC 1", date(2009, 12, 1)) == date(2010, 1, 22)


def test_resolve_explicit_year_is_never_rolled():
    assert resolve_date("22 January 2009", date(2009, 12, 1)) == date(2009, 1, 22)


def test_resolve_month_first_and_abbreviated():
    assert resolve_date("November 22, 2020", date(2020, 11, 1)) == date(2020, 11, 22)
    assert resolve_date("Friday 3rd of Jan 2020", date(2020, 1, 1)) == date(2020, 1, 3)


def test_resolve_weekday_anchored_day_uses_reference_month():
    assert resolve_date("Saturday night 14th", date(2021, 8, 1)) == date(2021, 8, 14)


def test_resolve_rejects_captions_without_a_day():
    assert resolve_date("1:00am - 3:00am", date(2009, 12, 1)) is None
    assert resolve_date("fsfdfa", date(2009, 12, 1)) is None
    assert resolve_date("Sunday 10:30pm", date(2009, 12, 1)) is None
    assert resolve_date("", date(2009, 12, 1)) is None
    assert resolve_date(None, date(2009, 12, 1)) is None


def test_resolve_rejects_impossible_dates():
    assert resolve_date("31 February 2021", date(2021, 2, 1)) is None
    assert resolve_date("29 February", date(2021, 2, 1)) is None


def test_resolve_is_deterministic():
    caption = "Saturday morning 4 January on ABC TV"
    reference = date(2019, 12, 1)
    assert resolve_date(caption, reference) == resolve_date(caption, reference) == date(2020, 1, 4)


def test_month_helpers():
    assert first_of_month(date(2020, 1, 17)) == date(2020, 1, 1)
    assert next_month(date(2020, 1, 17)) == date(2020, 2, 1)
    assert next_month(date(2020, 12, 31)) == date(2021, 1, 1)


def test_resolve_ignores_numbers_that_are_not_days():
    # Channel numbers and clock times next to a weekday or month name.
    assert resolve_date("Sunday on ABC 1", date(2020, 11, 1)) is None
    assert resolve_date("Friday night ABC 2", date(2020, 11, 1)) is None
    assert resolve_date("Rage Saturday May 10:30pm", date(2020, 5, 1)) is None
    assert resolve_date("Saturday 11:00 22 November", date(2020, 11, 1)) == date(2020, 11, 22)


def test_resolve_without_reference_needs_full_date():
    assert resolve_date("Sunday night 22 November 2020 on ABC 1", None) == date(2020, 11, 22)
    assert resolve_date("Sunday night 22 November on ABC 1", None) is None
    assert resolve_date("Saturday night 14th", None) is None
