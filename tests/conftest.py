"""Shared fixtures for crop_yield tests."""
import pytest

from crop_yield.data import generate_sample_dataset
from crop_yield.schema import ObservationRecord


def make_record(**overrides) -> ObservationRecord:
    values = dict(
        temperature=25.0,
        rainfall=150.0,
        humidity=65.0,
        season="summer",
        crop_type="wheat",
        soil_type="loam",
        pesticide_type="organic",
        pesticide_amount=2.0,
        farm_size=10.0,
        irrigation_type="drip",
        fertilizer=100.0,
        crop_yield=40.0,
    )
    values.update(overrides)
    return ObservationRecord(**values)


@pytest.fixture
def record():
    return make_record()


@pytest.fixture
def identical_records():
    return [make_record() for _ in range(10)]


@pytest.fixture(scope="session")
def sample_dataset():
    return generate_sample_dataset(200, seed=7)
