import json

import pandas as pd
import pytest

from millennium.lib.io_guards import DataLoadError, load_raw_csv, write_csv, write_json


def test_load_raw_csv_keeps_text(tmp_path):
    p = tmp_path / "raw.csv"
    p.write_text("Description,Bank Rate\nUnits,%\n1700,n/a\n1701,\n1702,5.0\n", encoding="utf-8")
    df = load_raw_csv(p)
    assert df["Bank Rate"].tolist() == ["%", "n/a", "", "5.0"]
    assert df["Description"].tolist() == ["Units", "1700", "1701", "1702"]


def test_load_raw_csv_missing_file(tmp_path):
    with pytest.raises(DataLoadError, match="Data loading failed"):
        load_raw_csv(tmp_path / "nope.csv")


def test_load_raw_csv_empty_file(tmp_path):
    p = tmp_path / "empty.csv"
    p.write_text("", encoding="utf-8")
    with pytest.raises(DataLoadError):
        load_raw_csv(p)


def test_write_csv_atomic_with_backup(tmp_path):
    target = tmp_path / "out" / "enriched.csv"
    write_csv(pd.DataFrame({"year": [1300]}), target)
    assert target.exists()
    write_csv(pd.DataFrame({"year": [1301]}), target)
    prev = target.with_name("enriched_prev.csv")
    assert prev.exists()
    assert pd.read_csv(prev)["year"].tolist() == [1300]
    assert pd.read_csv(target)["year"].tolist() == [1301]
    # no temp files left behind
    assert sorted(p.name for p in target.parent.iterdir()) == ["enriched.csv", "enriched_prev.csv"]


def test_write_json_dry_run(tmp_path):
    target = tmp_path / "summary.json"
    write_json({"a": 1}, target, dry_run=True)
    assert not target.exists()
    write_json({"a": 1}, target)
    assert json.loads(target.read_text(encoding="utf-8")) == {"a": 1}
