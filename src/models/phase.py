"""
Phase classification result for a single calendar day.
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from src.models.cycle import CycleModel


class PhaseTag(str, Enum):
    """
    Closed set of labels a day can carry, most specific first.
    """
    MENSTRUAL = "menstrual"
    PREMENSTRUAL = "premenstrual"
    OVULATION = "ovulation"
    PROBABILITY = "probability"  # Ordinary day, labelled by its tier
    NONE = "none"                # Profile has no anchor


class ProbabilityTier(str, Enum):
    """
    Coarse fertility-likelihood bucket.
    """
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    NONE = ""


class PhaseResult(BaseModel):
    """
    Represents the classification of one day against a profile's cycle.
    """
    model_config = ConfigDict(frozen=True)

    menstrual: bool = False
    premenstrual: bool = False
    ovulation: bool = False
    premenstrual_intensity: int = Field(0, ge=0, le=7)
    probability: ProbabilityTier = ProbabilityTier.NONE
    tag: PhaseTag = PhaseTag.NONE
    label: str = ""
    model: Optional[CycleModel] = None

    @property
    def has_data(self) -> bool:
        return self.tag != PhaseTag.NONE
