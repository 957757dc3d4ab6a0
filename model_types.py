import math
import numbers
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict, Optional


class InvalidArgumentError(ValueError):
    """Raised when a run parameter or epoch index is out of range."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise InvalidArgumentError(message)


def is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def is_positive_real(value: Any) -> bool:
    return (isinstance(value, numbers.Real) and not isinstance(value, bool)
            and math.isfinite(value) and value > 0)


@dataclass(frozen=True)
class TrainingRunConfig:
    """Parameters of one simulated training run."""
    dataset_id: str
    total_epochs: int
    learning_rate: float = 0.01
    # Collected by the playground UI; the simulated curves ignore them.
    batch_size: int = 32
    optimizer: str = "adam"
    hidden_layers: int = 3
    neurons_per_layer: int = 64
    regularization: float = 0.001
    activation: str = "relu"

    def __post_init__(self):
        _require(is_integer(self.total_epochs) and self.total_epochs > 0,
                 f"total_epochs must be a positive int, got {self.total_epochs!r}")
        _require(is_positive_real(self.learning_rate),
                 f"learning_rate must be positive, got {self.learning_rate!r}")
        _require(is_integer(self.batch_size) and self.batch_size > 0,
                 f"batch_size must be a positive int, got {self.batch_size!r}")
        _require(is_integer(self.hidden_layers) and self.hidden_layers >= 0,
                 f"hidden_layers must be >= 0, got {self.hidden_layers!r}")
        _require(is_integer(self.neurons_per_layer) and self.neurons_per_layer > 0,
                 f"neurons_per_layer must be a positive int, got {self.neurons_per_layer!r}")
        _require(self.regularization >= 0,
                 f"regularization must be >= 0, got {self.regularization!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MetricSample:
    """Metrics reported for a single simulated epoch.

    Validation metrics are only produced on some epochs; when absent they
    are None rather than zero.
    """
    epoch: int
    accuracy: float
    loss: float
    val_accuracy: Optional[float] = None
    val_loss: Optional[float] = None

    @property
    def has_validation(self) -> bool:
        return self.val_accuracy is not None and self.val_loss is not None

    def to_log_dict(self) -> Dict[str, float]:
        log_dict = {
            'epoch': self.epoch,
            'train_loss': self.loss,
            'train_accuracy': self.accuracy
        }
        if self.has_validation:
            log_dict.update({
                'val_loss': self.val_loss,
                'val_accuracy': self.val_accuracy
            })
        return log_dict


class RunStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class RunState:
    """Mutable progress of one run, owned by the run that drives it."""
    total_epochs: int
    current_epoch: int = 0
    status: RunStatus = field(default=RunStatus.IDLE)

    @property
    def is_running(self) -> bool:
        return self.status is RunStatus.RUNNING

    @property
    def is_finished(self) -> bool:
        return self.status in (RunStatus.COMPLETED, RunStatus.CANCELLED)

    @property
    def progress(self) -> float:
        """Percentage of epochs emitted so far."""
        return 100 * self.current_epoch / self.total_epochs


@dataclass(frozen=True)
class DatasetStats:
    total_samples: int
    training_samples: int
    testing_samples: int


@dataclass(frozen=True)
class AlgorithmResult:
    """One row of the algorithm comparison table."""
    name: str
    accuracy: float
    loss: float
    training_time: float
    parameters: int


@dataclass(frozen=True)
class FeatureContribution:
    """Simulated SHAP explanation for one input feature."""
    feature: str
    importance: float
    contribution: float


@dataclass(frozen=True)
class WaterfallStep:
    """One bar of a SHAP waterfall, from the base value to the prediction.

    ``kind`` is one of 'base', 'positive', 'negative' or 'prediction';
    ``prev_cumulative`` is only set on feature steps.
    """
    feature: str
    value: float
    cumulative: float
    kind: str
    prev_cumulative: Optional[float] = None
