from luckydraw.domain.pool_layout import (
    BATCH_SIZE,
    POOL_LAYOUT,
    batched,
    expected_total,
    generate_sign_rows,
    sign_id,
)


def test_sign_id_format():
    assert sign_id(1, 1) == "S01-0001"
    assert sign_id(0, 9610) == "S00-9610"


def test_pool_layout_rows():
    rows = generate_sign_rows()
    assert expected_total() == 10_000
    assert len(rows) == 10_000
    assert len({row["id"] for row in rows}) == 10_000
    assert not any(row["is_drawn"] for row in rows)
    assert sum(1 for row in rows if row["level"] == 1) == 40
    assert rows[0] == {
        "id": "S01-0001",
        "level": 1,
        "type": "Top-Top",
        "reward_code": "R01",
        "is_drawn": False,
    }
    assert {entry.reward_code for entry in POOL_LAYOUT} == {"R01", "R02", "R03", "EMPTY"}


def test_batched_keeps_every_row():
    rows = generate_sign_rows()
    batches = batched(rows)
    assert len(batches) == 20
    assert all(len(batch) <= BATCH_SIZE for batch in batches)
    assert sum(len(batch) for batch in batches) == len(rows)
