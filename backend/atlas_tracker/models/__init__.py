from .enums import CompoundCategory, Laterality, Modality, RotationRating
from .injection import (
    InjectionEvent,
    IntervalDecision,
    QualityFactor,
    QualityResult,
    RotationCheck,
    SiteUsage,
)
