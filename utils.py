from typing import Optional
import numpy as np
import torch.nn as nn
import wandb
from model_types import TrainingRunConfig

def setup_wandb(config: TrainingRunConfig, project_name: str = "ml-playground") -> None:
    """Start a wandb run tagged with the simulated run's dataset."""
    wandb.init(
        project=project_name,
        config=config.to_dict(),
        tags=["simulated", config.dataset_id or "default"]
    )

def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the random source that drives metric noise."""
    return np.random.default_rng(seed)

def count_parameters(model: nn.Module, trainable_only: bool = True) -> int:
    return sum(p.numel() for p in model.parameters() if p.requires_grad or not trainable_only)
