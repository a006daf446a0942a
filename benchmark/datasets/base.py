"""Trial lists for verification benchmarks."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

TARGET_LABELS = {"target", "tgt", "same", "1", "true"}
NONTARGET_LABELS = {"nontarget", "imp", "impostor", "different", "0", "false"}


@dataclass
class Trial:
    """
    One verification trial.

    Attributes:
        enroll: Name of the first model
        test: Name of the second model
        target: True when both models belong to the same speaker
    """
    enroll: str
    test: str
    target: bool

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "enroll": self.enroll,
            "test": self.test,
            "target": self.target,
        }


class TrialList:
    """
    Trials plus the directory their models live in.

    Model names resolve to ``model_dir / name``; ``.json`` is appended when
    the name has no suffix.
    """

    def __init__(
        self,
        trials_file: str,
        model_dir: Optional[str] = None,
        max_trials: Optional[int] = None,
    ):
        """
        Load a trial list.

        Args:
            trials_file: Path to the trial list
            model_dir: Directory containing the models (defaults to the list's directory)
            max_trials: Optional limit on number of trials to load
        """
        self.trials_file = Path(trials_file)
        if not self.trials_file.exists():
            raise FileNotFoundError(f"Trial list not found: {trials_file}")

        self.model_dir = Path(model_dir) if model_dir else self.trials_file.parent
        self.trials: List[Trial] = parse_trials(self.trials_file)
        if max_trials is not None:
            self.trials = self.trials[:max_trials]

    @property
    def name(self) -> str:
        """Dataset name for reporting."""
        return self.trials_file.stem

    def model_path(self, name: str) -> Path:
        path = self.model_dir / name
        return path if path.suffix else path.with_suffix(".json")

    @property
    def model_names(self) -> List[str]:
        """Distinct model names in order of first use."""
        names = {}
        for trial in self.trials:
            names.setdefault(trial.enroll, None)
            names.setdefault(trial.test, None)
        return list(names)

    def __len__(self) -> int:
        return len(self.trials)

    def __iter__(self) -> Iterator[Trial]:
        return iter(self.trials)

    def __getitem__(self, idx: int) -> Trial:
        return self.trials[idx]

    def get_summary(self) -> Dict:
        """Get summary statistics for the trial list."""
        n_target = sum(1 for t in self.trials if t.target)
        return {
            "name": self.name,
            "n_trials": len(self.trials),
            "n_target": n_target,
            "n_nontarget": len(self.trials) - n_target,
            "n_models": len(self.model_names),
        }


def parse_trials(trials_path: Path) -> List[Trial]:
    """
    Parse a trial list.

    Format, one trial per line (``#`` starts a comment)::

        <model_a> <model_b> target|nontarget

    Args:
        trials_path: Path to the trial list

    Returns:
        List of Trial objects
    """
    trials = []

    with open(trials_path, "r") as f:
        for line in f:
            line = line.split("#", 1)[0].strip()
            if not line:
                continue

            parts = line.split()
            if len(parts) < 3:
                logger.warning(f"Skipping trial line with {len(parts)} fields: {line}")
                continue

            label = parts[2].lower()
            if label in TARGET_LABELS:
                target = True
            elif label in NONTARGET_LABELS:
                target = False
            else:
                logger.warning(f"Skipping trial with unknown label {parts[2]!r}: {line}")
                continue

            trials.append(Trial(enroll=parts[0], test=parts[1], target=target))

    return trials
