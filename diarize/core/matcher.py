"""Same-speaker decisions between GMM speakers.

Detection score defined in Ben et al. 2005: both models are D-MAP normalized
against the UBM, then ``score = 1 - divergence(other, self)``. A pair is only
scored when both models fit their training data well enough, judged by mean
log-likelihood.
"""

import math
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from diarize.core.speaker import Speaker
from diarize.exceptions import NormalizationFailure
from diarize.models.schemas import MatchResult

if TYPE_CHECKING:
    from diarize.core.context import DiarizationContext

logger = logging.getLogger(__name__)

SpeakerPair = Tuple[Speaker, Speaker]


class SpeakerMatcher:
    """
    Decide whether two speakers are the same person.

    Thresholds are read from the context settings on every call so they can
    be re-tuned without rebuilding the matcher. Comparisons that cannot be
    scored (likelihood gate, undefined divergence, failed normalization) give
    ``None`` and never abort a batch; dimension mismatches propagate.
    """

    def __init__(self, context: "DiarizationContext"):
        self.context = context

    @property
    def log_likelihood_threshold(self) -> float:
        return self.context.settings.log_likelihood_threshold

    @property
    def detection_threshold(self) -> float:
        return self.context.settings.detection_threshold

    def passes_likelihood_gate(self, speaker1: Speaker, speaker2: Speaker) -> bool:
        """True when both mean log-likelihoods exceed the threshold. NaN never passes."""
        mll1 = speaker1.mean_log_likelihood
        mll2 = speaker2.mean_log_likelihood
        if math.isnan(mll1) or math.isnan(mll2):
            return False
        return min(mll1, mll2) > self.log_likelihood_threshold

    def compare(self, speaker1: Speaker, speaker2: Speaker) -> MatchResult:
        """
        Score a pair and report why no decision was taken when it cannot be.

        Normalizes both speakers in place as a side effect.
        """
        if not self.passes_likelihood_gate(speaker1, speaker2):
            return MatchResult(reason="likelihood below threshold")

        try:
            self.context.normalize(speaker1)
            self.context.normalize(speaker2)
        except NormalizationFailure as e:
            logger.warning(f"[MATCH] {e}")
            return MatchResult(reason="normalization failed")

        # Argument order (other, self) is deliberate; the metric is not symmetric
        divergence = self.context.divergence(speaker2, speaker1)
        if divergence is None:
            return MatchResult(reason="divergence undefined")

        score = 1.0 - divergence
        is_match = score > self.detection_threshold
        logger.debug(
            f"[MATCH] {speaker1.uri!r} vs {speaker2.uri!r}: score={score:.4f} "
            f"threshold={self.detection_threshold} match={is_match}"
        )
        return MatchResult(is_match=is_match, decided=True, score=score)

    def detection_score(self, speaker1: Speaker, speaker2: Speaker) -> Optional[float]:
        return self.compare(speaker1, speaker2).score

    def same_speaker(self, speaker1: Speaker, speaker2: Speaker) -> Optional[bool]:
        """True/False for a scored pair, None when no decision could be taken."""
        result = self.compare(speaker1, speaker2)
        if not result.decided:
            return None
        return result.is_match

    def match_pairs_within(self, speakers: Sequence[Speaker]) -> List[SpeakerPair]:
        """Every unordered pair (i < j) judged to be the same speaker. O(n^2) comparisons."""
        matches = []
        for i, speaker1 in enumerate(speakers):
            for speaker2 in speakers[i + 1:]:
                if self.same_speaker(speaker1, speaker2):
                    matches.append((speaker1, speaker2))

        logger.info(f"[MATCH] {len(matches)} matching pairs among {len(speakers)} speakers")
        return matches

    def match_pairs_across(
        self,
        speakers1: Sequence[Speaker],
        speakers2: Sequence[Speaker],
    ) -> List[SpeakerPair]:
        """
        Cross product of two sets filtered by ``same_speaker``.

        There is no exclusivity constraint: one speaker may match several
        speakers of the other set.
        """
        matches = [
            (speaker1, speaker2)
            for speaker1 in speakers1
            for speaker2 in speakers2
            if self.same_speaker(speaker1, speaker2)
        ]

        logger.info(
            f"[MATCH] {len(matches)} matching pairs across "
            f"{len(speakers1)} x {len(speakers2)} speakers"
        )
        return matches
