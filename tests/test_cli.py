"""Tests for the rlsforecast command-line interface."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from rlsforecast.cli import build_parser, main


def _write_csv(path, n: int = 40, seed: int = 9) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    df = pd.DataFrame(
        {
            "date": pd.date_range("2010-01-01", periods=n, freq="QS").strftime("%Y-%m-%d"),
            "gdp": rng.normal(size=n),
            "spread": rng.normal(size=n),
            "term": rng.normal(size=n),
        }
    )
    df.to_csv(path, index=False)
    return df


class TestParser:

    def test_defaults_from_config(self):
        args = build_parser().parse_args(["--input", "a.csv", "--target", "y"])
        assert args.pi0 == 0.5
        assert args.horizon == 1
        assert args.n_jobs == 1
        assert args.predictors is None
        assert args.output == ""

    def test_requires_input_and_target(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:

    def test_writes_error_table(self, tmp_path):
        src = tmp_path / "data.csv"
        out = tmp_path / "errors.csv"
        _write_csv(src)

        code = main([
            "--input", str(src), "--target", "gdp", "--index-col", "date",
            "--pi0", "0.5", "--horizon", "2", "--output", str(out),
        ])

        assert code == 0
        table = pd.read_csv(out, index_col=0)
        assert list(table.columns) == ["ehat0", "spread", "term"]
        # n=40, k0=20, h=2
        assert len(table) == 19
        assert table.index[0] == "2015-04-01"

    def test_predictor_subset(self, tmp_path):
        src = tmp_path / "data.csv"
        out = tmp_path / "errors.csv"
        _write_csv(src)

        code = main([
            "--input", str(src), "--target", "gdp", "--index-col", "date",
            "--predictors", "term", "--output", str(out),
        ])

        assert code == 0
        assert list(pd.read_csv(out, index_col=0).columns) == ["ehat0", "term"]

    def test_prints_to_stdout(self, tmp_path, capsys):
        src = tmp_path / "data.csv"
        _write_csv(src)
        code = main(["--input", str(src), "--target", "gdp", "--index-col", "date"])
        assert code == 0
        assert capsys.readouterr().out.splitlines()[0] == "date,ehat0,spread,term"

    def test_missing_target(self, tmp_path):
        src = tmp_path / "data.csv"
        _write_csv(src)
        assert main(["--input", str(src), "--target", "nope"]) == 1

    def test_missing_predictor(self, tmp_path):
        src = tmp_path / "data.csv"
        _write_csv(src)
        code = main([
            "--input", str(src), "--target", "gdp", "--index-col", "date",
            "--predictors", "spread", "nope",
        ])
        assert code == 1

    def test_invalid_horizon(self, tmp_path):
        src = tmp_path / "data.csv"
        _write_csv(src)
        code = main([
            "--input", str(src), "--target", "gdp", "--index-col", "date",
            "--horizon", "40",
        ])
        assert code == 1

    def test_zero_workers(self, tmp_path):
        src = tmp_path / "data.csv"
        _write_csv(src)
        code = main([
            "--input", str(src), "--target", "gdp", "--index-col", "date",
            "--n-jobs", "0",
        ])
        assert code == 1

    def test_non_numeric_column_rejected(self, tmp_path):
        src = tmp_path / "data.csv"
        _write_csv(src)
        # Without --index-col the date strings become a predictor.
        assert main(["--input", str(src), "--target", "gdp"]) == 1

    def test_unreadable_file(self, tmp_path):
        assert main(["--input", str(tmp_path / "missing.csv"), "--target", "gdp"]) == 1
