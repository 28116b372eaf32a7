from datetime import datetime

from mediahub.logic.models import PerformanceEntry, PerformanceMetrics
from mediahub.logic.rollup import rollup_entries

COMPUTED_AT = datetime(2026, 10, 18, 9, 30)


def make_entry(date_start, publication_name="Chicago Reader", channel="print", deleted_at=None, **metrics):
    return PerformanceEntry(
        campaign_id="C1",
        publication_id=42,
        publication_name=publication_name,
        channel=channel,
        date_start=date_start,
        order_id="O1",
        metrics=PerformanceMetrics(**metrics),
        deleted_at=deleted_at,
    )


def test_rollup_groups_by_day_and_channel():
    rows = rollup_entries(
        [
            make_entry(datetime(2026, 10, 17, 8), impressions=100, clicks=4),
            make_entry(datetime(2026, 10, 17, 20), impressions=300, clicks=6, reach=50),
            make_entry(datetime(2026, 10, 17, 9), channel="newsletter", impressions=10),
            make_entry(datetime(2026, 10, 16, 9), impressions=1),
        ],
        COMPUTED_AT,
    )
    assert [(row.date.day, row.channel) for row in rows] == [(16, "print"), (17, "newsletter"), (17, "print")]
    print_row = rows[2]
    assert print_row.impressions == 400
    assert print_row.clicks == 10
    assert print_row.reach == 50
    assert print_row.entry_count == 2
    assert print_row.ctr == 10 / 400
    assert print_row.computed_at == COMPUTED_AT


def test_rollup_skips_soft_deleted_entries():
    rows = rollup_entries(
        [
            make_entry(datetime(2026, 10, 17), insertions=1),
            make_entry(datetime(2026, 10, 17), insertions=5, deleted_at=datetime(2026, 10, 18)),
        ],
        COMPUTED_AT,
    )
    assert len(rows) == 1
    assert rows[0].units_delivered == 1
    assert rows[0].entry_count == 1


def test_rollup_keeps_first_publication_name_without_validation():
    # Known limitation: a renamed publication inside one group is not reconciled.
    rows = rollup_entries(
        [
            make_entry(datetime(2026, 10, 17, 8), publication_name="Chicago Reader"),
            make_entry(datetime(2026, 10, 17, 9), publication_name="The Reader"),
        ],
        COMPUTED_AT,
    )
    assert rows[0].publication_name == "Chicago Reader"
    assert rows[0].entry_count == 2


def test_rollup_of_nothing_is_empty():
    assert rollup_entries([], COMPUTED_AT) == []


def test_rollup_skips_entries_with_negative_metrics(caplog):
    with caplog.at_level("WARNING", logger="mediahub.logic.rollup"):
        rows = rollup_entries(
            [
                make_entry(datetime(2026, 10, 17, 8), insertions=-4, impressions=-10, clicks=3),
                make_entry(datetime(2026, 10, 17, 9), insertions=2, impressions=40, clicks=2),
            ],
            COMPUTED_AT,
        )

    (row,) = rows
    assert row.units_delivered == 2
    assert row.impressions == 40
    assert row.clicks == 2
    assert row.entry_count == 1
    assert "negative impressions, insertions" in caplog.text
