"""
Election Workflow Status

Defines the six workflow phases of an election round and the forward
transition table used by the engine's phase-advance operation.
"""

from enum import IntEnum
from typing import Dict, Optional


class WorkflowStatus(IntEnum):
    """Phase of the current election round, in strict forward order."""
    REGISTERING_VOTERS = 0              # Administrator whitelists voters
    PROPOSALS_REGISTRATION_STARTED = 1  # Voters submit proposals
    PROPOSALS_REGISTRATION_ENDED = 2
    VOTING_SESSION_STARTED = 3          # Voters cast one vote each
    VOTING_SESSION_ENDED = 4            # Waiting for tally
    VOTES_TALLIED = 5                   # Round finished; only reset leaves it


INITIAL_STATUS = WorkflowStatus.REGISTERING_VOTERS

# Phases reachable through advance_phase. VOTING_SESSION_ENDED leaves only
# through tally and VOTES_TALLIED only through reset, so neither appears.
_NEXT_STATUS: Dict[WorkflowStatus, WorkflowStatus] = {
    WorkflowStatus.REGISTERING_VOTERS:             WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
    WorkflowStatus.PROPOSALS_REGISTRATION_STARTED: WorkflowStatus.PROPOSALS_REGISTRATION_ENDED,
    WorkflowStatus.PROPOSALS_REGISTRATION_ENDED:   WorkflowStatus.VOTING_SESSION_STARTED,
    WorkflowStatus.VOTING_SESSION_STARTED:         WorkflowStatus.VOTING_SESSION_ENDED,
}


def next_status(status: WorkflowStatus) -> Optional[WorkflowStatus]:
    """Return the phase advance_phase moves to, or None if it may not advance."""
    return _NEXT_STATUS.get(status)
