"""
Service module for classifying calendar days into cycle phases.

A day is checked against the cycle instance that covers it. The menstrual,
premenstrual and ovulation flags and the probability tier are computed
independently; only the label follows a fixed precedence
(see ``PHASE_PRECEDENCE``).

Typical usage:
    >>> result = classify(date(2024, 1, 14), AnchorSet(date(2024, 1, 1)))
    >>> result.ovulation, result.probability.value
    (True, 'High')
"""
from datetime import date
from typing import Mapping, Optional

from src.models.cycle import CycleModel
from src.models.phase import PhaseResult, PhaseTag, ProbabilityTier
from src.models.profile import Anchor, AnchorSet
from src.services.constants import (
    HIGH_PROBABILITY_RADIUS,
    MAX_PREMENSTRUAL_INTENSITY,
    MEDIUM_PROBABILITY_AFTER_OVULATION,
    MEDIUM_PROBABILITY_RANGE,
    PHASE_LABELS,
    PHASE_PRECEDENCE
)
from src.services.cycle import compute_model
from src.utils.dates import add_days, as_day, diff_days

NO_DATA = PhaseResult()


def calculate_probability_tier(day: date, model: CycleModel) -> ProbabilityTier:
    """
    Get the fertility tier of a day.

    High covers the ovulation day and one day either side. Medium covers
    days start+4..start+6 plus the single day two days after ovulation;
    the two Medium bands are disjoint. Everything else is Low.
    """
    ovulation = model.ovulation_day
    if add_days(ovulation, -HIGH_PROBABILITY_RADIUS) <= day <= add_days(ovulation, HIGH_PROBABILITY_RADIUS):
        return ProbabilityTier.HIGH

    band_start, band_end = MEDIUM_PROBABILITY_RANGE
    in_band = add_days(model.start, band_start) <= day <= add_days(model.start, band_end)
    if in_band or day == add_days(ovulation, MEDIUM_PROBABILITY_AFTER_OVULATION):
        return ProbabilityTier.MEDIUM

    return ProbabilityTier.LOW


def calculate_premenstrual_intensity(day: date, model: CycleModel) -> int:
    """
    Get the premenstrual intensity of a day, 1..7 inside the window, else 0.

    Rises by one per day from the window's first day to the day before the
    next cycle starts.
    """
    if not model.premenstrual_start <= day <= model.premenstrual_end:
        return 0
    days_until_next_start = diff_days(model.next_start, day)
    intensity = MAX_PREMENSTRUAL_INTENSITY + 1 - days_until_next_start
    return max(1, min(MAX_PREMENSTRUAL_INTENSITY, intensity))


def select_phase_tag(
    menstrual: bool,
    premenstrual: bool,
    ovulation: bool,
    probability: ProbabilityTier
) -> PhaseTag:
    """Pick the first tag in ``PHASE_PRECEDENCE`` whose condition holds."""
    matched = {
        PhaseTag.MENSTRUAL: menstrual,
        PhaseTag.PREMENSTRUAL: premenstrual,
        PhaseTag.OVULATION: ovulation,
        PhaseTag.PROBABILITY: probability != ProbabilityTier.NONE,
    }
    for tag in PHASE_PRECEDENCE:
        if matched[tag]:
            return tag
    return PhaseTag.NONE


def phase_label(
    tag: PhaseTag,
    probability: ProbabilityTier,
    labels: Optional[Mapping[str, str]] = None
) -> str:
    labels = {**PHASE_LABELS, **(labels or {})}
    if tag == PhaseTag.NONE:
        return ""
    if tag == PhaseTag.PROBABILITY:
        return labels[probability.value]
    return labels[tag.value]


def classify(
    query_date: date,
    anchor: Anchor,
    labels: Optional[Mapping[str, str]] = None
) -> PhaseResult:
    """
    Classify a day against a profile's cycle.

    Args:
        query_date: Day to classify, time-of-day is ignored
        anchor: The profile's anchor; ``AnchorUnset`` yields the empty result
        labels: Optional replacement for the human-facing labels, keyed by
                tag value or tier value

    Returns:
        PhaseResult with flags, intensity, probability tier and label

    Example:
        >>> classify(date(2024, 1, 28), AnchorSet(date(2024, 1, 1))).premenstrual_intensity
        7
    """
    if not isinstance(anchor, AnchorSet):
        return NO_DATA

    day = as_day(query_date)
    model = compute_model(day, anchor.day)

    menstrual = model.start <= day <= model.menstrual_end
    premenstrual = model.premenstrual_start <= day <= model.premenstrual_end
    ovulation = day == model.ovulation_day
    probability = calculate_probability_tier(day, model)
    tag = select_phase_tag(menstrual, premenstrual, ovulation, probability)

    return PhaseResult(
        menstrual=menstrual,
        premenstrual=premenstrual,
        ovulation=ovulation,
        premenstrual_intensity=calculate_premenstrual_intensity(day, model),
        probability=probability,
        tag=tag,
        label=phase_label(tag, probability, labels),
        model=model
    )
