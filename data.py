import math
from typing import Dict, Optional
from model_types import DatasetStats, InvalidArgumentError


class DatasetCatalog:
    """Handles per-dataset constants for the built-in playground datasets."""
    DEFAULT_CEILING = 0.95
    DEFAULT_SIZE = 1000

    CEILINGS: Dict[str, float] = {
        'mnist': 0.98,
        'iris': 0.99,
        'boston': 0.92,
        'cifar': 0.85
    }

    SIZES: Dict[str, int] = {
        'mnist': 70000,
        'iris': 150,
        'boston': 506,
        'cifar': 60000,
        'titanic': 891,
        'credit_risk': 1000
    }

    @classmethod
    def ceiling_for(cls, dataset_id: Optional[str]) -> float:
        """Return the maximum accuracy a simulated run on this dataset approaches."""
        if not dataset_id:
            return cls.DEFAULT_CEILING
        return cls.CEILINGS.get(dataset_id, cls.DEFAULT_CEILING)

    @classmethod
    def size_of(cls, dataset_id: Optional[str]) -> int:
        """Return the number of samples in a dataset."""
        if not dataset_id:
            return cls.DEFAULT_SIZE
        return cls.SIZES.get(dataset_id, cls.DEFAULT_SIZE)

    @classmethod
    def split(cls, dataset_id: Optional[str], train_ratio: float = 0.8) -> DatasetStats:
        """Split a dataset's samples into training and testing counts."""
        if not 0 < train_ratio < 1:
            raise InvalidArgumentError(f"train_ratio must be in (0, 1), got {train_ratio!r}")

        total = cls.size_of(dataset_id)
        training = math.floor(total * train_ratio)
        return DatasetStats(
            total_samples=total,
            training_samples=training,
            testing_samples=total - training
        )
