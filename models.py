from typing import Dict, List
import torch.nn as nn
from model_types import InvalidArgumentError
from utils import count_parameters

ACTIVATIONS = {
    'relu': nn.ReLU,
    'gelu': nn.GELU,
    'selu': nn.SELU,
    'tanh': nn.Tanh,
    'sigmoid': nn.Sigmoid
}


class ModelArchitecture:
    """Untrained MLP previewing what the chosen hyperparameters would build."""
    def __init__(self,
                 input_size: int,
                 output_size: int,
                 hidden_sizes: List[int] = None,
                 activation: str = 'relu'):
        if activation not in ACTIVATIONS:
            raise InvalidArgumentError(
                f"Unknown activation {activation!r}, expected one of {sorted(ACTIVATIONS)}")
        for name, size in (('input_size', input_size), ('output_size', output_size)):
            if size <= 0:
                raise InvalidArgumentError(f"{name} must be positive, got {size}")

        self.input_size = input_size
        self.output_size = output_size
        self.hidden_sizes = list(hidden_sizes or [])
        self.activation = activation
        self.layers = self._build_layers()

    def _build_layers(self) -> nn.Sequential:
        """Build the layer structure."""
        layers = []
        prev_size = self.input_size

        for hidden_size in self.hidden_sizes:
            layers.extend([
                nn.Linear(prev_size, hidden_size),
                ACTIVATIONS[self.activation]()
            ])
            prev_size = hidden_size

        layers.append(nn.Linear(prev_size, self.output_size))
        return nn.Sequential(*layers)

    def summary(self) -> str:
        lines = [f"Model architecture ({self.activation}):"]
        for i, layer in enumerate(self.layers):
            lines.append(f"  Layer {i}: {layer}")
        lines.append(f"Trainable parameters: {count_parameters(self.layers)}")
        return "\n".join(lines)

    def get_complexity_stats(self) -> Dict[str, float]:
        """Return model complexity statistics."""
        total_params = count_parameters(self.layers, trainable_only=False)

        return {
            'total_parameters': total_params,
            'trainable_parameters': count_parameters(self.layers),
            'model_size_mb': total_params * 32 / (8 * 1024 * 1024),
            'hidden_layers': len(self.hidden_sizes)
        }


def build_model_architecture(hidden_layers: int,
                             neurons_per_layer: int,
                             activation: str,
                             input_size: int,
                             output_size: int) -> ModelArchitecture:
    """Build the architecture for ``hidden_layers`` equally sized hidden layers."""
    if hidden_layers < 0:
        raise InvalidArgumentError(f"hidden_layers must be >= 0, got {hidden_layers}")
    if neurons_per_layer <= 0:
        raise InvalidArgumentError(f"neurons_per_layer must be positive, got {neurons_per_layer}")

    print(f"Creating model with {hidden_layers} hidden layers of {neurons_per_layer} neurons "
          f"(input={input_size}, output={output_size}, activation={activation})")
    return ModelArchitecture(
        input_size=input_size,
        output_size=output_size,
        hidden_sizes=[neurons_per_layer] * hidden_layers,
        activation=activation
    )
