"""Scheduler interface and loading."""

import importlib.util
import pathlib
from datetime import date
from typing import Protocol

from flashsr.models import CardReviewState, Grade
from flashsr.sm2 import SM2Scheduler

BUILTIN_SCHEDULERS = {"sm2": SM2Scheduler}


class Scheduler(Protocol):
    scheduler_id: str

    def next_state(self, state: CardReviewState, grade: Grade, today: date) -> CardReviewState:
        ...


def load_scheduler(name: str, sr_dir: pathlib.Path | None = None) -> Scheduler:
    """Return a scheduler by name.

    Built-in engines are returned directly. Any other name is looked up as a
    plugin at sr_dir/schedulers/<name>/<name>.py defining a `Scheduler` class.
    """
    if name in BUILTIN_SCHEDULERS:
        return BUILTIN_SCHEDULERS[name]()
    if sr_dir is None:
        raise FileNotFoundError(f"Scheduler not found: {name}")
    sched_path = pathlib.Path(sr_dir) / "schedulers" / name / f"{name}.py"
    if not sched_path.exists():
        raise FileNotFoundError(f"Scheduler not found: {sched_path}")
    spec = importlib.util.spec_from_file_location(f"flashsr_scheduler_{name}", str(sched_path))
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod.Scheduler()
