"""Tests for synthetic data generation, shuffling, and CSV I/O."""
import pandas as pd
import pytest

from crop_yield.config import CONTINUOUS_RANGES, CATEGORY_DOMAINS, YIELD_RANGE
from crop_yield.data import (
    DatasetGenerator, generate_sample_dataset, shuffle_dataset,
    expected_yield, pesticide_effect, fertilizer_effect,
    records_to_frame, load_dataset, save_dataset, COLUMNS,
)
from crop_yield.errors import ValidationError


class TestGenerator:
    def test_returns_requested_count(self):
        assert len(generate_sample_dataset(25, seed=1)) == 25

    def test_values_within_ranges(self, sample_dataset):
        for r in sample_dataset:
            for name, (low, high) in CONTINUOUS_RANGES.items():
                assert low <= getattr(r, name) <= high, name
            for name, domain in CATEGORY_DOMAINS.items():
                assert getattr(r, name) in domain
            assert YIELD_RANGE[0] <= r.crop_yield <= YIELD_RANGE[1]

    def test_yield_rounded_to_cents(self, sample_dataset):
        for r in sample_dataset:
            assert round(r.crop_yield, 2) == r.crop_yield

    def test_seeded_generation_is_reproducible(self):
        assert generate_sample_dataset(20, seed=3) == generate_sample_dataset(20, seed=3)

    def test_different_seeds_differ(self):
        assert generate_sample_dataset(20, seed=3) != generate_sample_dataset(20, seed=4)

    def test_injected_rng(self):
        import numpy as np
        a = DatasetGenerator(rng=np.random.default_rng(11)).generate(5)
        b = DatasetGenerator(seed=11).generate(5)
        assert a == b

    @pytest.mark.parametrize("count", [0, -3])
    def test_non_positive_count_rejected(self, count):
        with pytest.raises(ValidationError):
            generate_sample_dataset(count, seed=1)

    def test_all_categories_appear(self, sample_dataset):
        seen = {r.crop_type for r in sample_dataset}
        assert seen == set(CATEGORY_DOMAINS["crop_type"])


class TestYieldModel:
    def test_optimal_conditions(self):
        y = expected_yield(22.5, 150.0, 65.0, "wheat", "silt", "organic", 0.0, "flood", 0.0)
        assert y == pytest.approx(30.0)

    def test_no_pesticide_penalty(self):
        y = expected_yield(22.5, 150.0, 65.0, "wheat", "silt", "none", 5.0, "flood", 0.0)
        assert y == pytest.approx(24.0)

    def test_penalty_floors(self):
        # temperature 60 and rainfall 1000 are far past their floors
        y = expected_yield(60.0, 1000.0, 65.0, "wheat", "silt", "organic", 0.0, "flood", 0.0)
        assert y == pytest.approx(30.0 * 0.3 * 0.4)

    def test_pesticide_saturates(self):
        assert pesticide_effect("synthetic", 2.0) == pytest.approx(1.1)
        assert pesticide_effect("synthetic", 8.0) == pytest.approx(1.3)

    def test_fertilizer_saturates(self):
        assert fertilizer_effect(60.0) == pytest.approx(1.2)
        assert fertilizer_effect(250.0) == pytest.approx(1.4)

    def test_multipliers_compound(self):
        y = expected_yield(22.5, 150.0, 65.0, "potato", "loam", "organic", 0.0, "drip", 0.0)
        assert y == pytest.approx(30.0 * 1.4 * 1.1 * 1.2)


class TestShuffle:
    def test_is_permutation(self):
        items = list(range(30))
        shuffled = shuffle_dataset(items, seed=5)
        assert sorted(shuffled) == items
        assert shuffled != items

    def test_input_untouched(self):
        items = list(range(10))
        shuffle_dataset(items, seed=5)
        assert items == list(range(10))

    def test_seeded(self):
        assert shuffle_dataset(list(range(10)), seed=9) == shuffle_dataset(list(range(10)), seed=9)


class TestCSV:
    def test_frame_columns(self, sample_dataset):
        df = records_to_frame(sample_dataset[:5])
        assert list(df.columns) == COLUMNS
        assert len(df) == 5

    def test_save_then_load(self, tmp_path, sample_dataset):
        path = save_dataset(sample_dataset[:20], tmp_path / "data.csv")
        assert load_dataset(path) == sample_dataset[:20]

    def test_blank_cells_use_defaults(self, tmp_path):
        path = tmp_path / "upload.csv"
        path.write_text(
            "temperature,rainfall,humidity,season,crop_type,soil_type,pesticide_type,"
            "pesticide_amount,farm_size,irrigation_type,fertilizer,yield\n"
            ",120,70,,corn,clay,synthetic,abc,,drip,150,\n",
            encoding="utf-8",
        )
        (r,) = load_dataset(path)
        assert r.temperature == 0.0
        assert r.season == "spring"
        assert r.pesticide_amount == 0.0
        assert r.farm_size == 1.0
        assert r.crop_type == "corn"
        assert r.crop_yield is None

    def test_missing_target_column(self, tmp_path, sample_dataset):
        df = records_to_frame(sample_dataset[:3]).drop(columns=["yield"])
        path = tmp_path / "unlabeled.csv"
        df.to_csv(path, index=False)
        assert all(r.crop_yield is None for r in load_dataset(path))

    def test_missing_feature_column(self, tmp_path, sample_dataset):
        df = records_to_frame(sample_dataset[:3]).drop(columns=["humidity"])
        path = tmp_path / "broken.csv"
        df.to_csv(path, index=False)
        with pytest.raises(ValidationError):
            load_dataset(path)

    def test_header_only_rejected(self, tmp_path):
        path = tmp_path / "empty.csv"
        pd.DataFrame(columns=COLUMNS).to_csv(path, index=False)
        with pytest.raises(ValidationError):
            load_dataset(path)

    def test_zero_byte_file_rejected(self, tmp_path):
        path = tmp_path / "blank.csv"
        path.write_bytes(b"")
        with pytest.raises(ValidationError):
            load_dataset(path)

    def test_malformed_rows_rejected(self, tmp_path):
        path = tmp_path / "malformed.csv"
        header = ",".join(COLUMNS)
        good = "25,150,65,summer,wheat,loam,organic,2,10,drip,100,40"
        path.write_text(f"{header}\n{good}\n{good},1,2,3\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_dataset(path)

    def test_camel_case_headers(self, tmp_path):
        path = tmp_path / "export.csv"
        path.write_text(
            "temperature,rainfall,humidity,season,cropType,soilType,pesticideType,"
            "pesticideAmount,farmSize,irrigationType,fertilizer,yield\n"
            "24.5,160,70,fall,rice,clay,biological,3.5,12,flood,180,33.25\n",
            encoding="utf-8",
        )
        (r,) = load_dataset(path)
        assert r.crop_type == "rice"
        assert r.soil_type == "clay"
        assert r.pesticide_type == "biological"
        assert r.pesticide_amount == 3.5
        assert r.farm_size == 12.0
        assert r.irrigation_type == "flood"
        assert r.crop_yield == 33.25
