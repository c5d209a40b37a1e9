"""
Election Records

Voter and Proposal records owned by the election engine. The engine hands
out copies from its read operations so callers cannot mutate its state.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict


@dataclass
class Voter:
    """
    Whitelist entry for one identity.

    Fields:
        is_registered:      Whitelisted for the current round
        has_voted:          Cast a vote this round
        voted_proposal_id:  Index of the proposal voted for (0 until voting)
    """
    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_id: int = 0

    def clear(self):
        """Return the record to its unregistered defaults."""
        self.is_registered = False
        self.has_voted = False
        self.voted_proposal_id = 0

    def copy(self) -> "Voter":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isRegistered": self.is_registered,
            "hasVoted": self.has_voted,
            "votedProposalId": self.voted_proposal_id,
        }

    def __repr__(self) -> str:
        vote = f" proposal=#{self.voted_proposal_id}" if self.has_voted else ""
        return (
            f"<Voter registered={self.is_registered} "
            f"voted={self.has_voted}{vote}>"
        )


@dataclass
class Proposal:
    """A proposal submitted during the registration phase."""
    description: str
    vote_count: int = 0

    def copy(self) -> "Proposal":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "voteCount": self.vote_count,
        }

    def __repr__(self) -> str:
        return f"<Proposal '{self.description}' votes={self.vote_count}>"
