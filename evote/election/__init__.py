"""
evote Election Engine

Provides:
  - WorkflowStatus / next_status                          (status.py)
  - Voter / Proposal                                      (models.py)
  - WorkflowStatusChanged / VoterRegistered / ...         (events.py)
  - Clock / SystemClock / ManualClock                     (providers.py)
  - RandomnessSource and its implementations              (randomness.py)
  - compute_tied_winners / choose_winner                  (tally.py)
  - ElectionEngine                                        (engine.py)
"""

from .status import (
    INITIAL_STATUS,
    WorkflowStatus,
    next_status,
)
from .models import (
    Proposal,
    Voter,
)
from .events import (
    ElectionEvent,
    ElectionReset,
    ProposalRegistered,
    VoteCast,
    VoterRegistered,
    WorkflowStatusChanged,
)
from .providers import (
    Clock,
    ManualClock,
    SystemClock,
    single_administrator,
)
from .randomness import (
    FixedRandomness,
    RandomnessSource,
    SystemRandomness,
    TimestampHashRandomness,
    make_randomness,
)
from .tally import (
    choose_winner,
    compute_tied_winners,
)
from .engine import ElectionEngine

__all__ = [
    # Status
    "INITIAL_STATUS",
    "WorkflowStatus",
    "next_status",
    # Records
    "Proposal",
    "Voter",
    # Events
    "ElectionEvent",
    "ElectionReset",
    "ProposalRegistered",
    "VoteCast",
    "VoterRegistered",
    "WorkflowStatusChanged",
    # Collaborators
    "Clock",
    "ManualClock",
    "SystemClock",
    "single_administrator",
    "FixedRandomness",
    "RandomnessSource",
    "SystemRandomness",
    "TimestampHashRandomness",
    "make_randomness",
    # Tally
    "choose_winner",
    "compute_tied_winners",
    # Engine
    "ElectionEngine",
]
