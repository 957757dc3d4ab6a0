from __future__ import annotations

from typing import List

import pytest

from model_types import MetricSample
from utils import make_rng


class Recorder:
    """Collects the callbacks a run makes."""

    def __init__(self):
        self.samples: List[MetricSample] = []
        self.completions = 0

    def on_sample(self, sample: MetricSample) -> None:
        self.samples.append(sample)

    def on_complete(self) -> None:
        self.completions += 1

    @property
    def epochs(self) -> List[int]:
        return [s.epoch for s in self.samples]


@pytest.fixture
def rng():
    return make_rng(1234)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
