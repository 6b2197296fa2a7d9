"""Tests for the collector and aggregator."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pandas as pd
import pytest
from conftest import make_table

from madtraits.aggregate import aggregate
from madtraits.collect import TaggedResult, collect_datasets
from madtraits.datasources.models import DatasetResult
from madtraits.datasources.registry import ProviderRegistry
from madtraits.errors import ProviderFailure, TypeContractError, UnknownProviderError
from madtraits.store import TraitCache, cache_filename


class TestCollectDatasets:
    """Driving providers in order, with and without a cache."""

    def test_unknown_name_runs_nothing(self, providers: ProviderRegistry) -> None:
        spy = Mock(return_value=DatasetResult())
        providers.register("spy.2010")(spy)
        sleep = Mock()

        with pytest.raises(UnknownProviderError) as info:
            collect_datasets(["spy.2010", "nope.1999"], registry=providers, sleep=sleep)

        assert info.value.unknown == ("nope.1999",)
        spy.assert_not_called()
        sleep.assert_not_called()

    def test_tags_every_row_with_dataset(self, providers: ProviderRegistry) -> None:
        collection = collect_datasets(["alpha.2001", "beta.2002"], registry=providers, delay=0)

        assert [r.name for r in collection.results] == ["alpha.2001", "beta.2002"]
        beta = collection.results[1]
        assert beta.numeric is not None
        assert beta.categorical is not None
        assert beta.numeric["dataset"].tolist() == ["beta.2002"]
        assert beta.categorical["dataset"].tolist() == ["beta.2002"]

    def test_failure_does_not_abort(
        self, providers: ProviderRegistry, capsys: pytest.CaptureFixture[str]
    ) -> None:
        collection = collect_datasets(
            ["broken.2003", "alpha.2001"], registry=providers, sleep=Mock()
        )

        assert [r.name for r in collection.results] == ["alpha.2001"]
        assert collection.failed == ["broken.2003"]
        failure = collection.failures[0]
        assert isinstance(failure, ProviderFailure)
        assert isinstance(failure.cause, ConnectionError)
        assert "broken.2003" in capsys.readouterr().err

    def test_contract_violation_is_a_failure(self, providers: ProviderRegistry) -> None:
        providers.register("bad.2011")(
            lambda: DatasetResult(numeric=pd.DataFrame({"species": ["a"]}))
        )
        providers.register("wrong.2012")(lambda: {"numeric": None})

        collection = collect_datasets(["bad.2011", "wrong.2012"], registry=providers, sleep=Mock())

        assert collection.results == []
        assert collection.failed == ["bad.2011", "wrong.2012"]

    def test_delay_after_each_download(self, providers: ProviderRegistry) -> None:
        sleep = Mock()
        collect_datasets(
            ["alpha.2001", "broken.2003", "beta.2002"], registry=providers, delay=7, sleep=sleep
        )
        assert sleep.call_count == 3
        sleep.assert_called_with(7)

    def test_cache_hit_skips_provider_and_delay(
        self, providers: ProviderRegistry, tmp_path: Path
    ) -> None:
        cache = TraitCache(tmp_path)
        cache.put("alpha.2001", DatasetResult(numeric=make_table([("cached_sp", "h", 1.0)])))
        sleep = Mock()

        collection = collect_datasets(
            ["alpha.2001", "beta.2002"], registry=providers, cache=cache, sleep=sleep
        )

        assert collection.from_cache == ["alpha.2001"]
        assert collection.invoked == ["beta.2002"]
        assert sleep.call_count == 1
        alpha = collection.results[0]
        assert alpha.numeric is not None
        assert alpha.numeric["species"].tolist() == ["cached_sp"]
        assert alpha.numeric["dataset"].tolist() == ["alpha.2001"]

    def test_fresh_results_are_cached_untagged(
        self, providers: ProviderRegistry, tmp_path: Path
    ) -> None:
        cache = TraitCache(tmp_path)
        collect_datasets(["beta.2002"], registry=providers, cache=cache, sleep=Mock())

        cached = cache.get("beta.2002")
        assert cached is not None
        assert cached.numeric is not None
        assert "dataset" not in cached.numeric.columns

    def test_failures_are_not_cached(self, providers: ProviderRegistry, tmp_path: Path) -> None:
        cache = TraitCache(tmp_path)
        collect_datasets(["broken.2003"], registry=providers, cache=cache, sleep=Mock())
        assert "broken.2003" not in cache

    def test_cache_round_trip_invokes_once(self, tmp_path: Path) -> None:
        reg = ProviderRegistry()
        calls = Mock(
            return_value=DatasetResult(
                numeric=make_table([("quercus_robur", "height", 12.0, "m")]),
                categorical=make_table(
                    [("quercus_robur", "leaf_habit", "deciduous")], kind="categorical"
                ),
            )
        )
        reg.register("oak.2020")(calls)
        cache = TraitCache(tmp_path)

        first = collect_datasets(registry=reg, cache=cache, sleep=Mock())
        second = collect_datasets(registry=reg, cache=cache, sleep=Mock())

        assert calls.call_count == 1
        assert aggregate(first.results) == aggregate(second.results)


class TestUncastableValues:
    """A provider whose values don't fit its table kind is one failure, not a crash."""

    @pytest.fixture
    def mixed(self) -> ProviderRegistry:
        reg = ProviderRegistry()

        @reg.register("bad.2001")
        def bad() -> DatasetResult:
            return DatasetResult(
                numeric=pd.DataFrame(
                    {
                        "species": ["quercus_robur"],
                        "variable": ["height"],
                        "value": ["12 m"],
                        "units": [None],
                        "metadata": [None],
                    }
                )
            )

        @reg.register("good.2002")
        def good() -> DatasetResult:
            return DatasetResult(numeric=make_table([("quercus_ilex", "height", 8.0)]))

        return reg

    def test_run_continues(self, mixed: ProviderRegistry) -> None:
        collection = collect_datasets(["bad.2001", "good.2002"], registry=mixed, sleep=Mock())

        assert [r.name for r in collection.results] == ["good.2002"]
        assert collection.failed == ["bad.2001"]
        assert isinstance(collection.failures[0].cause, TypeContractError)

    def test_bad_result_not_cached(self, mixed: ProviderRegistry, tmp_path: Path) -> None:
        cache = TraitCache(tmp_path)

        collect_datasets(["bad.2001", "good.2002"], registry=mixed, cache=cache, sleep=Mock())
        second = collect_datasets(
            ["bad.2001", "good.2002"], registry=mixed, cache=cache, sleep=Mock()
        )

        assert cache.keys() == ["good.2002"]
        assert second.invoked == ["bad.2001"]
        assert second.from_cache == ["good.2002"]
        assert second.failed == ["bad.2001"]

    def test_bad_cache_entry_is_a_failure(self, mixed: ProviderRegistry, tmp_path: Path) -> None:
        cache = TraitCache(tmp_path)
        record = {
            "species": "quercus_robur",
            "variable": "height",
            "value": "12 m",
            "units": None,
            "metadata": None,
        }
        cache.write(
            Path(cache_filename("bad.2001")),
            {"numeric": [record], "categorical": None},
            source="bad.2001",
        )

        collection = collect_datasets(
            ["bad.2001", "good.2002"], registry=mixed, cache=cache, sleep=Mock()
        )

        assert collection.from_cache == ["bad.2001"]
        assert collection.failed == ["bad.2001"]
        assert [r.name for r in collection.results] == ["good.2002"]

    def test_unreadable_cache_file_is_a_failure(
        self, providers: ProviderRegistry, tmp_path: Path
    ) -> None:
        cache = TraitCache(tmp_path)
        cache.path("alpha.2001").write_text('{"meta": {"source": "alpha.2001"}, "da')

        collection = collect_datasets(
            ["alpha.2001", "beta.2002"], registry=providers, cache=cache, sleep=Mock()
        )

        assert collection.failed == ["alpha.2001"]
        assert [r.name for r in collection.results] == ["beta.2002"]


class TestAggregate:
    """Concatenating tagged results."""

    def test_concatenates_in_order(self) -> None:
        results = [
            TaggedResult("a", DatasetResult(numeric=make_table([("sp_a", "h", 1.0)])).tagged("a")),
            TaggedResult("b", DatasetResult(numeric=make_table([("sp_b", "h", 2.0)])).tagged("b")),
        ]

        db = aggregate(results)

        assert db.numeric is not None
        assert db.numeric["species"].tolist() == ["sp_a", "sp_b"]
        assert db.numeric["dataset"].tolist() == ["a", "b"]
        assert db.numeric.index.tolist() == [0, 1]

    def test_kind_absent_everywhere_is_none(self) -> None:
        results = [
            TaggedResult("a", DatasetResult(numeric=make_table([("sp_a", "h", 1.0)])).tagged("a")),
        ]
        db = aggregate(results)
        assert db.categorical is None

    def test_no_results(self) -> None:
        db = aggregate([])
        assert db.numeric is None
        assert db.categorical is None

    def test_no_deduplication(self) -> None:
        table = DatasetResult(numeric=make_table([("sp_a", "h", 1.0)]))
        db = aggregate([TaggedResult("a", table.tagged("a")), TaggedResult("a", table.tagged("a"))])
        assert db.numeric is not None
        assert len(db.numeric) == 2
