import math
from typing import List, Optional
import numpy as np
from data import DatasetCatalog
from model_types import (AlgorithmResult, FeatureContribution, InvalidArgumentError, MetricSample,
                         WaterfallStep, is_integer, is_positive_real)

VALIDATION_EVERY = 5


def _check_epoch(epoch: int, total_epochs: int) -> None:
    if not is_integer(total_epochs) or total_epochs <= 0:
        raise InvalidArgumentError(f"total_epochs must be a positive int, got {total_epochs!r}")
    if not is_integer(epoch) or not 1 <= epoch <= total_epochs:
        raise InvalidArgumentError(f"epoch must be in [1, {total_epochs}], got {epoch!r}")


def sample_metrics(epoch: int,
                   total_epochs: int,
                   dataset_id: Optional[str],
                   learning_rate: Optional[float] = None,
                   rng: Optional[np.random.Generator] = None) -> MetricSample:
    """Simulate the metrics of one training epoch.

    Accuracy saturates exponentially from 0.5 towards the dataset's ceiling
    and loss decays exponentially towards 0.1, each with a little uniform
    noise. Validation metrics are added every fifth epoch and on the last one.

    ``learning_rate`` is validated but does not shape the curves.
    """
    _check_epoch(epoch, total_epochs)
    epoch, total_epochs = int(epoch), int(total_epochs)
    if learning_rate is not None and not is_positive_real(learning_rate):
        raise InvalidArgumentError(f"learning_rate must be positive, got {learning_rate!r}")
    if rng is None:
        rng = np.random.default_rng()

    ceiling = DatasetCatalog.ceiling_for(dataset_id)
    progress = epoch / total_epochs
    decay = math.exp(-5 * progress)

    base_accuracy = 0.5 + (ceiling - 0.5) * (1 - decay)
    accuracy = min(ceiling, base_accuracy + float(rng.uniform(-0.01, 0.01)))

    base_loss = 1.0 * decay + 0.1
    loss = max(0.01, base_loss + float(rng.uniform(-0.02, 0.02)))

    if epoch % VALIDATION_EVERY == 0 or epoch == total_epochs:
        return MetricSample(
            epoch=epoch,
            accuracy=accuracy,
            loss=loss,
            val_accuracy=accuracy * float(rng.uniform(0.9, 1.0)),
            val_loss=loss * float(rng.uniform(1.1, 1.2))
        )

    return MetricSample(epoch=epoch, accuracy=accuracy, loss=loss)


def algorithm_comparison() -> List[AlgorithmResult]:
    """Return reference results used to compare algorithms side by side."""
    return [
        AlgorithmResult("Neural Network", accuracy=0.96, loss=0.13, training_time=4.2, parameters=24601),
        AlgorithmResult("Random Forest", accuracy=0.92, loss=0.21, training_time=1.8, parameters=12350),
        AlgorithmResult("SVM", accuracy=0.89, loss=0.28, training_time=2.9, parameters=4230),
        AlgorithmResult("Logistic Regression", accuracy=0.86, loss=0.35, training_time=1.2, parameters=785)
    ]


def shap_values(model_type: str,
                rng: Optional[np.random.Generator] = None) -> List[FeatureContribution]:
    """Simulate per-feature SHAP values for a model.

    Linear regression explains four features plus its bias term; other
    models explain five features.
    """
    if rng is None:
        rng = np.random.default_rng()

    features = [f'Feature {i}' for i in range(1, 5)]
    features.append('Bias' if model_type == 'linear-regression' else 'Feature 5')

    return [
        FeatureContribution(
            feature=feature,
            importance=abs(float(rng.uniform(-1.0, 1.0))),
            contribution=float(rng.uniform(-1.0, 1.0))
        )
        for feature in features
    ]


def waterfall(values: List[FeatureContribution], base_value: float = 0.5) -> List[WaterfallStep]:
    """Accumulate contributions from ``base_value`` up to the final prediction."""
    steps = [WaterfallStep('Base Value', base_value, base_value, 'base')]
    cumulative = base_value

    for item in values:
        prev_cumulative = cumulative
        cumulative += item.contribution
        steps.append(WaterfallStep(
            feature=item.feature,
            value=item.contribution,
            cumulative=cumulative,
            kind='positive' if item.contribution >= 0 else 'negative',
            prev_cumulative=prev_cumulative
        ))

    steps.append(WaterfallStep('Prediction', cumulative, cumulative, 'prediction'))
    return steps
