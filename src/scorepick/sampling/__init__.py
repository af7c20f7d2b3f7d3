"""Distribution sampling subsystem for scorepick.

History-aware next-index selection: repetition penalty, temperature
scaling, softmax, top-k, top-p, then arg-max or inverse-CDF sampling.
"""

from scorepick.sampling.sampler import DistributionSampler
from scorepick.sampling.types import SampleResult, SamplerState

__all__ = [
    "DistributionSampler",
    "SampleResult",
    "SamplerState",
]
