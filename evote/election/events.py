"""
Election Notifications

One frozen record per state change. The engine returns each record from the
operation that produced it and appends it to its event log, so the host can
forward notifications without the engine knowing about any transport.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from .status import WorkflowStatus


@dataclass(frozen=True)
class WorkflowStatusChanged:
    """Emitted by advance_phase and by tally."""
    previous_status: WorkflowStatus
    new_status: WorkflowStatus
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "WorkflowStatusChange",
            "previousStatus": self.previous_status.name,
            "newStatus": self.new_status.name,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class VoterRegistered:
    """Emitted when an identity is whitelisted."""
    voter: str
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "VoterRegistered",
            "voter": self.voter,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ProposalRegistered:
    """Emitted when a proposal is appended; carries its index."""
    proposal_id: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalRegistered",
            "proposalId": self.proposal_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class VoteCast:
    """Emitted on every accepted vote."""
    voter: str
    proposal_id: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "Voted",
            "voter": self.voter,
            "proposalId": self.proposal_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ElectionReset:
    """Emitted when a finished round is wiped; timestamp is the reset instant."""
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ElectionReset",
            "timestamp": self.timestamp,
        }


ElectionEvent = Union[
    WorkflowStatusChanged,
    VoterRegistered,
    ProposalRegistered,
    VoteCast,
    ElectionReset,
]
