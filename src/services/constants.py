"""
Constants shared by the cycle, phase and state services.
"""
from typing import Dict, Tuple
from src.models.phase import PhaseTag

CYCLE_LENGTH = 28

# Offsets from the cycle start, in days
MENSTRUAL_END_OFFSET = 4
OVULATION_AFTER_MENSTRUATION = 9
PREMENSTRUAL_DAYS = 7

# Fertility bands relative to the cycle start and ovulation day
HIGH_PROBABILITY_RADIUS = 1
MEDIUM_PROBABILITY_RANGE = (4, 6)
MEDIUM_PROBABILITY_AFTER_OVULATION = 2

MAX_PREMENSTRUAL_INTENSITY = 7

# First match wins when choosing a day's label
PHASE_PRECEDENCE: Tuple[PhaseTag, ...] = (
    PhaseTag.MENSTRUAL,
    PhaseTag.PREMENSTRUAL,
    PhaseTag.OVULATION,
    PhaseTag.PROBABILITY,
)

PHASE_LABELS: Dict[str, str] = {
    PhaseTag.MENSTRUAL.value: "Menstrual",
    PhaseTag.PREMENSTRUAL.value: "Premenstrual",
    PhaseTag.OVULATION.value: "Ovulation",
    "High": "High",
    "Medium": "Medium",
    "Low": "Low",
}

PALETTE: Tuple[str, ...] = (
    "#ef4444",
    "#10b981",
    "#3b82f6",
    "#f59e0b",
    "#8b5cf6",
    "#14b8a6",
    "#f97316",
    "#e11d48",
)

STORAGE_KEY = "redday_full_poc_v8"
