"""Diarization context: the UBM, its derived vectors and the speaker registry.

Everything that would otherwise be process-wide state lives on one explicitly
constructed ``DiarizationContext``. Lazy members are computed once, under a
lock, and treated as immutable afterwards.
"""

import logging
import threading
from pathlib import Path
from typing import Optional

import numpy as np

from diarize.config import Settings, get_settings
from diarize.core.divergence import (
    DivergenceStrategy,
    FallbackDivergence,
    NativeDivergence,
    load_native_primitive,
)
from diarize.core.gmm import Mixture
from diarize.core.matcher import SpeakerMatcher
from diarize.core.normalizer import normalize
from diarize.core.registry import SpeakerRegistry
from diarize.core.speaker import Speaker
from diarize.core.supervector import covariance_supervector, weight_supervector
from diarize.exceptions import ModelFormatError, ModelMissing, ModelNotFound, UBMUnavailable
from diarize.services.model_store import BUNDLED_UBM_PATH, ModelStore, PathLike

logger = logging.getLogger(__name__)


class DiarizationContext:
    """
    Owns the shared state every matching operation needs.

    Args:
        settings: Thresholds and backend selection (defaults to ``get_settings()``)
        model_store: Mixture persistence (defaults to the JSON ``ModelStore``)
        ubm: Background mixture to use instead of loading ``settings.ubm_path``
        divergence_strategy: Strategy to use instead of the configured backend
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        model_store: Optional[ModelStore] = None,
        ubm: Optional[Mixture] = None,
        divergence_strategy: Optional[DivergenceStrategy] = None,
    ):
        self.settings = settings or get_settings()
        self.model_store = model_store or ModelStore()
        self.registry = SpeakerRegistry(self.new_speaker)

        self._ubm_mixture = ubm
        self._ubm_speaker: Optional[Speaker] = None
        self._ubm_weights: Optional[np.ndarray] = None
        self._ubm_covariances: Optional[np.ndarray] = None
        self._strategy = divergence_strategy
        self._matcher: Optional[SpeakerMatcher] = None
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Universal background model
    # ------------------------------------------------------------------

    @property
    def ubm_path(self) -> Path:
        return Path(self.settings.ubm_path) if self.settings.ubm_path else BUNDLED_UBM_PATH

    @property
    def ubm_mixture(self) -> Mixture:
        if self._ubm_mixture is None:
            with self._lock:
                if self._ubm_mixture is None:
                    self._ubm_mixture = self._load_ubm()
        return self._ubm_mixture

    def _load_ubm(self) -> Mixture:
        path = self.ubm_path
        try:
            mixture = self.model_store.load_model(path)
        except (ModelNotFound, ModelFormatError) as e:
            raise UBMUnavailable(f"Cannot load UBM from {path}: {e}") from e

        if mixture.is_empty:
            raise UBMUnavailable(f"UBM at {path} has no components")

        logger.info(
            f"[UBM] Loaded {mixture.name!r} from {path} "
            f"({mixture.nb_components} components, dim {mixture.dim})"
        )
        return mixture

    @property
    def ubm_speaker(self) -> Speaker:
        """Anonymous speaker wrapping the UBM, already normalized by definition."""
        if self._ubm_speaker is None:
            with self._lock:
                if self._ubm_speaker is None:
                    self._ubm_speaker = self.new_speaker()
        return self._ubm_speaker

    @property
    def ubm_weight_supervector(self) -> np.ndarray:
        if self._ubm_weights is None:
            with self._lock:
                if self._ubm_weights is None:
                    self._ubm_weights = weight_supervector(self.ubm_mixture)
        return self._ubm_weights

    @property
    def ubm_covariance_supervector(self) -> np.ndarray:
        if self._ubm_covariances is None:
            with self._lock:
                if self._ubm_covariances is None:
                    self._ubm_covariances = covariance_supervector(self.ubm_mixture)
        return self._ubm_covariances

    # ------------------------------------------------------------------
    # Divergence and normalization
    # ------------------------------------------------------------------

    @property
    def divergence_strategy(self) -> DivergenceStrategy:
        if self._strategy is None:
            with self._lock:
                if self._strategy is None:
                    self._strategy = self._build_strategy()
        return self._strategy

    def _build_strategy(self) -> DivergenceStrategy:
        if self.settings.divergence_backend == "native":
            logger.info(f"[DIV] Using native GDMAP from {self.settings.native_gdmap!r}")
            return NativeDivergence(load_native_primitive(self.settings.native_gdmap))

        return FallbackDivergence(self.ubm_weight_supervector, self.ubm_covariance_supervector)

    def divergence(self, speaker1: Speaker, speaker2: Speaker) -> Optional[float]:
        """Divergence from ``speaker1`` to ``speaker2``, None when undefined."""
        return self.divergence_strategy.divergence(speaker1, speaker2)

    def normalize(self, speaker: Speaker) -> bool:
        """D-MAP normalize ``speaker`` in place against this context's UBM."""
        if speaker.normalized:
            return True
        return normalize(speaker, self.ubm_speaker, self.divergence_strategy)

    # ------------------------------------------------------------------
    # Speakers
    # ------------------------------------------------------------------

    def new_speaker(self, uri: Optional[str] = None, gender: Optional[str] = None) -> Speaker:
        """A generic speaker associated with the UBM. The UBM is never normalized."""
        return Speaker(uri, gender, model=self.ubm_mixture, normalized=True)

    def load_speaker(
        self,
        resource: PathLike,
        uri: Optional[str] = None,
        gender: Optional[str] = None,
    ) -> Speaker:
        """Build a speaker from a stored model. Its mixture is owned and unnormalized."""
        model = self.model_store.load_model(resource)
        return Speaker(uri, gender, model=model, normalized=False, model_uri=str(resource))

    def save_speaker(self, speaker: Speaker, resource: PathLike) -> None:
        if speaker.model is None:
            raise ModelMissing(f"Speaker {speaker.uri!r} has no model to save")
        if speaker.normalized and speaker.model is not self._ubm_mixture:
            logger.warning(
                f"[STORE] Saving normalized model of {speaker.uri!r}; "
                "a reloaded copy is treated as unnormalized"
            )
        self.model_store.save_model(speaker.model, resource)

    @property
    def matcher(self) -> SpeakerMatcher:
        if self._matcher is None:
            with self._lock:
                if self._matcher is None:
                    self._matcher = SpeakerMatcher(self)
        return self._matcher
