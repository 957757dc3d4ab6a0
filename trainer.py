from typing import Callable, List, Optional
import threading
import numpy as np
from tqdm.auto import tqdm
import wandb
from metrics import sample_metrics
from model_types import InvalidArgumentError, MetricSample, RunState, RunStatus, TrainingRunConfig
from utils import setup_wandb

SampleCallback = Callable[[MetricSample], None]
CompleteCallback = Callable[[], None]


class SimulatedRun:
    """A single simulated training run, advanced one epoch per tick.

    Lifecycle is IDLE -> RUNNING -> COMPLETED | CANCELLED. Each tick while
    running emits the next epoch's sample; the tick after the last epoch
    completes the run and calls ``on_complete`` without emitting a sample.
    Cancelling never calls ``on_complete``.
    """
    def __init__(self,
                 config: TrainingRunConfig,
                 on_sample: SampleCallback,
                 on_complete: Optional[CompleteCallback] = None,
                 rng: Optional[np.random.Generator] = None,
                 verbose: bool = False,
                 use_wandb: bool = False,
                 wandb_project: str = "ml-playground"):
        self.config = config
        self.on_sample = on_sample
        self.on_complete = on_complete
        self.rng = rng if rng is not None else np.random.default_rng()
        self.verbose = verbose
        self.use_wandb = use_wandb
        self.wandb_project = wandb_project
        self.state = RunState(total_epochs=config.total_epochs)

        # Reentrant so callbacks may cancel their own run.
        self._lock = threading.RLock()
        self._finished = threading.Event()
        self._progress_bar = None
        self._started = False
        self._wandb_active = False

    def start(self) -> bool:
        """Move the run to RUNNING.

        Returns False when the run was cancelled before it could start, which
        happens when another start_run replaces it first.
        """
        with self._lock:
            if self._started:
                raise RuntimeError(f"Run already {self.state.status.value}; start a new run instead")
            self._started = True
            if self.state.status is RunStatus.CANCELLED:
                return False

            self.state.status = RunStatus.RUNNING
            if self.use_wandb:
                setup_wandb(self.config, self.wandb_project)
                self._wandb_active = True
            self._progress_bar = tqdm(total=self.config.total_epochs, desc="Epochs",
                                      leave=False, disable=not self.verbose)
            return True

    def tick(self) -> Optional[MetricSample]:
        """Advance the run by one step and return the emitted sample, if any."""
        with self._lock:
            if not self.state.is_running:
                return None

            if self.state.current_epoch >= self.state.total_epochs:
                self.state.status = RunStatus.COMPLETED
                try:
                    if self.on_complete is not None:
                        self.on_complete()
                finally:
                    self._finish(RunStatus.COMPLETED)
                return None

            self.state.current_epoch += 1
            sample = sample_metrics(
                self.state.current_epoch,
                self.config.total_epochs,
                self.config.dataset_id,
                self.config.learning_rate,
                rng=self.rng
            )

            self._progress_bar.update(1)
            self._progress_bar.set_postfix({
                'loss': f'{sample.loss:.4f}',
                'acc': f'{100. * sample.accuracy:.2f}%'
            })
            if self.use_wandb:
                wandb.log(sample.to_log_dict())

            self.on_sample(sample)
            return sample

    def cancel(self) -> bool:
        """Stop future ticks. Returns False if the run had already finished."""
        with self._lock:
            if self.state.is_finished:
                return False
            if self.verbose and self.state.is_running:
                print(f"\nTraining cancelled at epoch {self.state.current_epoch}")
            self._finish(RunStatus.CANCELLED)
            return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._finished.wait(timeout)

    def run_forever(self, interval: float) -> None:
        """Tick every ``interval`` seconds until the run finishes."""
        try:
            while not self._finished.wait(interval):
                self.tick()
        except Exception:
            self.cancel()
            raise

    def _finish(self, status: RunStatus) -> None:
        self.state.status = status
        if self._progress_bar is not None:
            self._progress_bar.close()
        if self._wandb_active:
            wandb.finish()
            self._wandb_active = False
        self._finished.set()


class RunHandle:
    """Caller-facing handle to a started run."""
    def __init__(self, run: SimulatedRun):
        self._run = run

    @property
    def state(self) -> RunState:
        return self._run.state

    @property
    def is_running(self) -> bool:
        return self._run.state.is_running

    def tick(self) -> Optional[MetricSample]:
        return self._run.tick()

    def cancel(self) -> bool:
        return self._run.cancel()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the run completes or is cancelled."""
        return self._run.wait(timeout)


class TrainingSimulator:
    """Drives simulated runs for one playground session.

    Only one run is active per session: starting a run cancels the previous
    one, so samples from two runs never interleave.
    """
    def __init__(self,
                 tick_interval: float = 0.3,
                 rng: Optional[np.random.Generator] = None,
                 verbose: bool = False,
                 use_wandb: bool = False,
                 wandb_project: str = "ml-playground"):
        if tick_interval < 0:
            raise InvalidArgumentError(f"tick_interval must be >= 0, got {tick_interval!r}")
        self.tick_interval = tick_interval
        self.rng = rng
        self.verbose = verbose
        self.use_wandb = use_wandb
        self.wandb_project = wandb_project

        self._lock = threading.Lock()
        self._active: Optional[SimulatedRun] = None
        self._runs: List[SimulatedRun] = []

    @property
    def active_run(self) -> Optional[SimulatedRun]:
        return self._active

    def start_run(self,
                  config: TrainingRunConfig,
                  on_sample: SampleCallback,
                  on_complete: Optional[CompleteCallback] = None,
                  background: bool = True) -> RunHandle:
        """Start a run and return its handle.

        With ``background=False`` nothing ticks the run; the caller drives it
        through ``RunHandle.tick``.
        """
        if not isinstance(config, TrainingRunConfig):
            raise InvalidArgumentError(f"config must be a TrainingRunConfig, got {type(config).__name__}")

        run = SimulatedRun(
            config,
            on_sample,
            on_complete,
            rng=self.rng,
            verbose=self.verbose,
            use_wandb=self.use_wandb,
            wandb_project=self.wandb_project
        )
        with self._lock:
            superseded = [r for r in self._runs if not r.state.is_finished]
            self._runs = superseded + [run]
            self._active = run

        # Run locks are taken outside the session lock: callbacks of the runs
        # being replaced may themselves call start_run.
        for previous in superseded:
            previous.cancel()

        if run.start() and background:
            worker = threading.Thread(
                target=run.run_forever,
                args=(self.tick_interval,),
                name=f"simulated-run-{config.dataset_id}",
                daemon=True
            )
            worker.start()

        return RunHandle(run)

    def cancel(self) -> bool:
        """Cancel the session's active run, if any."""
        with self._lock:
            run = self._active
        if run is None:
            return False
        return run.cancel()
