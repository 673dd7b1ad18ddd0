"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import date

import pytest

from flow_insights.models import FlowRecord, Sample
from helpers import DAY, at


@pytest.fixture
def day() -> date:
    return DAY


@pytest.fixture
def flow_samples() -> list[Sample]:
    """Two readings per 5-minute interval from 09:00 to 09:55, rising."""
    samples = []
    for i in range(12):
        samples.append(Sample(timestamp=at(9, i * 5), value=40.0 + i * 4))
        samples.append(Sample(timestamp=at(9, i * 5, 30), value=44.0 + i * 4))
    return samples


@pytest.fixture
def heart_rate_samples() -> list[Sample]:
    """One reading per 5-minute interval from 09:00 to 09:55, rising with flow."""
    return [Sample(timestamp=at(9, i * 5, 10), value=70.0 + i) for i in range(12)]


@pytest.fixture
def records() -> list[FlowRecord]:
    """Stored records over three days, in camelCase form."""
    raw = [
        {"userId": "u1", "_ts": at(10, day=date(2024, 3, 1)).timestamp(),
         "flowActivityValues": [60, 62], "heartRateValues": [72, 74],
         "frustratedIndicatorValue": [0.2], "excitedIndicatorValue": [0.7], "calmIndicatorValue": [0.4]},
        {"userId": "u1", "_ts": at(11, day=date(2024, 3, 1)).timestamp(),
         "flowActivityValues": [70], "heartRateValues": [80]},
        {"userId": "u1", "_ts": at(10, day=date(2024, 3, 2)).timestamp(),
         "flowActivityValues": [0], "heartRateValues": [0]},
        {"userId": "u1", "_ts": at(10, day=date(2024, 3, 3)).timestamp(),
         "flowActivityValues": [66], "heartRateValues": [78]},
    ]
    return [FlowRecord.model_validate(r) for r in raw]
