"""GMM speaker matching.

Decides whether two audio segments were spoken by the same person by
comparing Gaussian mixture speaker models in a UBM-anchored model space:

- D-MAP normalization places every model at unit divergence from the UBM
- GDMAP divergence (native toolkit or numpy approximation) scores a pair
- A mean log-likelihood gate keeps poorly fitted models out of decisions

Usage:
    from diarize import DiarizationContext

    context = DiarizationContext()
    s1 = context.load_speaker("models/s1.json", uri="S1")
    s2 = context.load_speaker("models/s2.json", uri="S2")
    context.matcher.same_speaker(s1, s2)
"""

from diarize.core.context import DiarizationContext
from diarize.core.gmm import GaussianComponent, Mixture
from diarize.core.matcher import SpeakerMatcher
from diarize.core.speaker import Speaker

__version__ = "0.1.0"

__all__ = [
    "DiarizationContext",
    "GaussianComponent",
    "Mixture",
    "Speaker",
    "SpeakerMatcher",
]
