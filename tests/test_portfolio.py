"""Tests for the tracked ticker list and its storage."""

import json

import pytest
from pydantic import ValidationError

from stockboard.exceptions import InvalidTicker
from stockboard.portfolio import Portfolio, PortfolioStore, normalize_ticker


class TestNormalizeTicker:
    """Tests for normalize_ticker."""

    @pytest.mark.parametrize("raw,expected", [
        (" aapl ", "AAPL"), ("brk.b", "BRK.B"), ("RDS-A", "RDS-A"), ("f", "F"),
    ])
    def test_accepts_ticker_shapes(self, raw: str, expected: str) -> None:
        assert normalize_ticker(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "TOOLONG", "AB1", "A B", "$SPY"])
    def test_rejects_other_input(self, raw: str) -> None:
        with pytest.raises(InvalidTicker, match="simple ticker"):
            normalize_ticker(raw)


class TestPortfolio:
    """Tests for Portfolio."""

    def test_add_keeps_insertion_order(self) -> None:
        portfolio = Portfolio().add("msft").add("aapl")
        assert portfolio.symbols == ("MSFT", "AAPL")

    def test_add_duplicate_is_noop(self) -> None:
        portfolio = Portfolio().add("AAPL")
        assert portfolio.add(" aapl") is portfolio

    def test_add_invalid_raises(self) -> None:
        with pytest.raises(InvalidTicker):
            Portfolio().add("123")

    def test_remove(self) -> None:
        portfolio = Portfolio(symbols=("AAPL", "MSFT"))

        assert portfolio.remove("aapl").symbols == ("MSFT",)
        assert portfolio.remove("TSLA").symbols == ("AAPL", "MSFT")

    def test_is_immutable(self) -> None:
        portfolio = Portfolio(symbols=("AAPL",))
        portfolio.add("MSFT")

        assert portfolio.symbols == ("AAPL",)
        with pytest.raises(ValidationError):
            portfolio.symbols = ()

    def test_duplicates_rejected(self) -> None:
        with pytest.raises(ValidationError, match="unique"):
            Portfolio(symbols=("AAPL", "AAPL"))

    def test_direct_construction_normalizes(self) -> None:
        portfolio = Portfolio(symbols=(" aapl", "brk.b"))
        assert portfolio.symbols == ("AAPL", "BRK.B")

    def test_direct_construction_rejects_bad_tickers(self) -> None:
        with pytest.raises(ValidationError, match="simple ticker"):
            Portfolio(symbols=("AAPL", "not valid"))

    def test_case_variants_are_duplicates(self) -> None:
        with pytest.raises(ValidationError, match="unique"):
            Portfolio(symbols=("AAPL", "aapl"))

    def test_contains_and_len(self) -> None:
        portfolio = Portfolio(symbols=("AAPL", "MSFT"))

        assert "aapl" in portfolio
        assert "TSLA" not in portfolio
        assert len(portfolio) == 2


class TestPortfolioStore:
    """Tests for PortfolioStore."""

    def test_missing_file_is_empty(self, tmp_path) -> None:
        assert PortfolioStore(tmp_path / "none.json").load() == Portfolio()

    def test_save_and_load(self, tmp_path) -> None:
        path = tmp_path / "nested" / "portfolio.json"
        store = PortfolioStore(path)

        store.save(Portfolio(symbols=("MSFT", "AAPL")))

        assert json.loads(path.read_text()) == ["MSFT", "AAPL"]
        assert store.load().symbols == ("MSFT", "AAPL")

    def test_invalid_entries_skipped(self, tmp_path, caplog) -> None:
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps(["aapl", "not a ticker", 42, "AAPL", "msft"]))

        portfolio = PortfolioStore(path).load()

        assert portfolio.symbols == ("AAPL", "MSFT")
        assert "Skipping invalid ticker" in caplog.text

    def test_corrupt_file_is_empty(self, tmp_path, caplog) -> None:
        path = tmp_path / "portfolio.json"
        path.write_text("{not json")

        assert PortfolioStore(path).load() == Portfolio()
        assert "Unable to read portfolio" in caplog.text

    def test_non_list_is_empty(self, tmp_path) -> None:
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps({"symbols": ["AAPL"]}))

        assert PortfolioStore(path).load() == Portfolio()

    def test_expands_home(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        store = PortfolioStore("~/portfolio.json")
        assert store.path == tmp_path / "portfolio.json"
