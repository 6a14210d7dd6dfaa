from __future__ import annotations

import pandas as pd

from txn_analytics import features


def test_add_engineered_features_derives_time_and_volume_columns(make_txn) -> None:
    transactions = [
        make_txn(id="a", created="2024-01-01 10:00:00", available_on="2024-01-01 10:10:59", customer_facing_amount=-25.5),
        make_txn(id="b", created="2024-02-15 23:30:00", available_on="2024-02-17 01:30:00", customer_facing_amount=None, customer_facing_currency=None),
    ]
    df = features.add_engineered_features(transactions)

    assert df["customer_volume"].tolist() == [25.5, 0.0]
    assert df["has_customer_amount"].tolist() == [True, False]
    assert df["settlement_volume"].tolist() == [1000.0, 1000.0]
    assert df["processing_minutes"].tolist() == [10, 1560]
    assert df["processing_hours"].tolist() == [0, 26]
    assert df["hour"].tolist() == ["10:00", "23:00"]
    assert df["weekday"].tolist() == ["Monday", "Thursday"]
    assert df["day"].tolist() == [pd.Timestamp("2024-01-01"), pd.Timestamp("2024-02-15")]
    assert df["month"].tolist() == [pd.Timestamp("2024-01-01"), pd.Timestamp("2024-02-01")]
    assert df["currency_key"].tolist() == ["USD", features.UNKNOWN_CURRENCY]


def test_unparseable_timestamps_leave_time_buckets_empty(make_txn) -> None:
    df = features.add_engineered_features([make_txn(created="yesterday", available_on="")])

    assert df["created_at"].isna().all()
    assert df["processing_minutes"].tolist() == [0]
    assert df["hour"].isna().all()
    assert df["day"].isna().all()


def test_ensure_features_reuses_engineered_frame(make_txn) -> None:
    engineered = features.add_engineered_features([make_txn()])
    again = features.ensure_features(engineered)

    pd.testing.assert_frame_equal(again, engineered)
    assert again is not engineered


def test_filter_window_keeps_rows_after_cutoff(make_txn) -> None:
    df = features.add_engineered_features(
        [
            make_txn(id="old", created="2024-01-01 12:00:00"),
            make_txn(id="mid", created="2024-01-05 12:00:00"),
            make_txn(id="new", created="2024-01-10 12:00:00"),
        ]
    )

    assert features.filter_window(df, 7)["id"].tolist() == ["mid", "new"]
    assert features.filter_window(df, None)["id"].tolist() == ["old", "mid", "new"]
    assert features.filter_window(df, 7).index.tolist() == [1, 2]


def test_empty_input_produces_empty_frame() -> None:
    df = features.add_engineered_features([])
    assert df.empty
    assert {"created_at", "customer_volume", "processing_minutes", "currency_key"}.issubset(df.columns)
