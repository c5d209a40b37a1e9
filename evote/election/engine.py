"""
Election Engine

Implements one election round at a time:
  - Voter whitelist maintained by the administrator
  - Proposal registration by whitelisted voters
  - One vote per voter, attributable to the voter's identity
  - Tally with tie-break among proposals sharing the highest count
  - Reset to a fresh round once the post-tally cooldown has elapsed

Every public operation takes the engine lock, so a caller never observes a
half-applied change. All checks run before any mutation.
"""

import threading
from typing import Any, Callable, Dict, List, Optional

from ..logger import get_logger
from ..constants import (
    ELECTION_RESET_COOLDOWN_SECONDS,
    LOG_MAX_DESCRIPTION_LENGTH,
    VALID_IDENTITY_PATTERN,
)
from ..exceptions import (
    AlreadyRegisteredError,
    AlreadyVotedError,
    ConfigurationError,
    ElectionError,
    HasNotVotedError,
    InvalidIdentityError,
    InvalidProposalError,
    InvalidTransitionError,
    NoVotesCastError,
    NotAuthorizedError,
    PhaseViolationError,
    TooEarlyError,
    UnknownProposalError,
)
from .events import (
    ElectionEvent,
    ElectionReset,
    ProposalRegistered,
    VoteCast,
    VoterRegistered,
    WorkflowStatusChanged,
)
from .models import Proposal, Voter
from .providers import AdminCheck, Clock, SystemClock, single_administrator
from .randomness import RandomnessSource, TimestampHashRandomness, make_randomness
from .status import INITIAL_STATUS, WorkflowStatus, next_status
from .tally import choose_winner, compute_tied_winners

logger = get_logger(__name__)


def _shorten(text: str) -> str:
    if len(text) <= LOG_MAX_DESCRIPTION_LENGTH:
        return text
    return text[:LOG_MAX_DESCRIPTION_LENGTH - 3] + "..."


class ElectionEngine:
    """
    Single-election workflow engine.

    Phases advance strictly forward:
        REGISTERING_VOTERS → PROPOSALS_REGISTRATION_STARTED →
        PROPOSALS_REGISTRATION_ENDED → VOTING_SESSION_STARTED →
        VOTING_SESSION_ENDED → VOTES_TALLIED

    advance_phase moves through the first four steps. tally is the only way
    out of VOTING_SESSION_ENDED and reset the only way out of VOTES_TALLIED.

    Mutating operations return the notification they emitted; the same
    record is appended to `events` and passed to `on_event` if given.
    """

    def __init__(
        self,
        administrator: Optional[str] = None,
        *,
        is_administrator_fn: Optional[AdminCheck] = None,
        clock: Optional[Clock] = None,
        randomness: Optional[RandomnessSource] = None,
        reset_cooldown_seconds: float = ELECTION_RESET_COOLDOWN_SECONDS,
        on_event: Optional[Callable[[ElectionEvent], None]] = None,
    ):
        """
        Args:
            administrator:          Identity allowed to run admin operations
            is_administrator_fn:    Host predicate (identity) → bool; overrides administrator
            clock:                  Source of the current instant (defaults to wall clock)
            randomness:             Tie-break source (defaults to timestamp hash)
            reset_cooldown_seconds: Minimum delay between tally and reset
            on_event:               Callback receiving every emitted notification
        """
        if is_administrator_fn is None:
            if not administrator:
                raise ConfigurationError(
                    "An administrator identity or is_administrator_fn is required"
                )
            is_administrator_fn = single_administrator(administrator)
        if reset_cooldown_seconds < 0:
            raise ConfigurationError("reset_cooldown_seconds cannot be negative")

        self.administrator = administrator
        self._is_administrator = is_administrator_fn
        self._clock = clock or SystemClock()
        self._randomness = randomness or TimestampHashRandomness(self._clock)
        self.reset_cooldown_seconds = reset_cooldown_seconds
        self._on_event = on_event

        self._lock = threading.RLock()

        # Election state
        self._status = INITIAL_STATUS
        self._voters: Dict[str, Voter] = {}
        self._registered_voter_ids: List[str] = []
        self._proposals: List[Proposal] = []
        self._tied_winner_ids: List[int] = []
        self._winner_id = 0
        self._tally_timestamp: Optional[float] = None
        self._any_vote_cast = False

        self._events: List[ElectionEvent] = []

        logger.info(f"Election engine ready (status={self._status.name})")

    @classmethod
    def from_config(
        cls,
        config,
        *,
        clock: Optional[Clock] = None,
        is_administrator_fn: Optional[AdminCheck] = None,
        on_event: Optional[Callable[[ElectionEvent], None]] = None,
    ) -> "ElectionEngine":
        """Build an engine from an `evote.config.ElectionConfig`."""
        config.validate()
        clock = clock or SystemClock()
        return cls(
            administrator=config.election.administrator or None,
            is_administrator_fn=is_administrator_fn,
            clock=clock,
            randomness=make_randomness(config.election.tie_break, clock),
            reset_cooldown_seconds=config.election.reset_cooldown_seconds,
            on_event=on_event,
        )

    # ── Guards ────────────────────────────────────────────────────────

    def _reject(self, error_cls, message: str) -> ElectionError:
        logger.warning(f"Rejected: {message}")
        return error_cls(message)

    def _require_administrator(self, caller: str, action: str):
        if not isinstance(caller, str) or not caller or not self._is_administrator(caller):
            raise self._reject(
                NotAuthorizedError, f"{caller!r} is not the administrator ({action})"
            )

    def _require_voter(self, caller: str, action: str) -> Voter:
        voter = self._voters.get(caller) if isinstance(caller, str) and caller else None
        if voter is None or not voter.is_registered:
            raise self._reject(
                NotAuthorizedError, f"{caller!r} is not a registered voter ({action})"
            )
        return voter

    def _require_status(self, expected: WorkflowStatus, action: str):
        if self._status != expected:
            raise self._reject(
                PhaseViolationError,
                f"Cannot {action} during {self._status.name}; "
                f"requires {expected.name}",
            )

    def _require_proposal(self, proposal_id: int) -> Proposal:
        if (
            isinstance(proposal_id, bool)
            or not isinstance(proposal_id, int)
            or not 0 <= proposal_id < len(self._proposals)
        ):
            raise self._reject(
                UnknownProposalError,
                f"Proposal #{proposal_id} does not exist "
                f"({len(self._proposals)} registered)",
            )
        return self._proposals[proposal_id]

    def _emit(self, event: ElectionEvent) -> ElectionEvent:
        self._events.append(event)
        if self._on_event is not None:
            self._on_event(event)
        return event

    def _set_status(self, new_status: WorkflowStatus) -> WorkflowStatusChanged:
        old = self._status
        self._status = new_status
        logger.info(f"Workflow status: {old.name} → {new_status.name}")
        return self._emit(WorkflowStatusChanged(
            previous_status=old,
            new_status=new_status,
            timestamp=self._clock.now(),
        ))

    # ── Phase transitions ─────────────────────────────────────────────

    def advance_phase(self, caller: str) -> WorkflowStatusChanged:
        """Move to the next phase. Not available once voting has ended."""
        with self._lock:
            self._require_administrator(caller, "advance phase")
            new_status = next_status(self._status)
            if new_status is None:
                remedy = "tally" if self._status == WorkflowStatus.VOTING_SESSION_ENDED else "reset"
                raise self._reject(
                    InvalidTransitionError,
                    f"Cannot advance from {self._status.name}; use {remedy}",
                )
            return self._set_status(new_status)

    def tally(self, caller: str) -> WorkflowStatusChanged:
        """
        Count the votes and close the round.

        Besides advance_phase this is the only operation that changes the
        phase: it always moves VOTING_SESSION_ENDED → VOTES_TALLIED, picking a
        winner first when at least one vote was cast.
        """
        with self._lock:
            self._require_administrator(caller, "tally votes")
            if self._status != WorkflowStatus.VOTING_SESSION_ENDED:
                raise self._reject(
                    InvalidTransitionError,
                    f"Cannot tally during {self._status.name}; "
                    f"requires {WorkflowStatus.VOTING_SESSION_ENDED.name}",
                )

            max_count, tied = compute_tied_winners(
                [p.vote_count for p in self._proposals]
            )
            winner_id = self._winner_id
            if self._any_vote_cast:
                winner_id = choose_winner(tied, self._randomness)

            self._tied_winner_ids = tied
            self._winner_id = winner_id
            self._tally_timestamp = self._clock.now()

            if self._any_vote_cast:
                logger.info(
                    f"Tally: proposal #{winner_id} wins with {max_count} vote(s) "
                    f"(tied={tied})"
                )
            else:
                logger.info("Tally: no votes cast, no winner")
            return self._set_status(WorkflowStatus.VOTES_TALLIED)

    def reset(self, caller: str) -> ElectionReset:
        """Wipe the finished round and reopen voter registration."""
        with self._lock:
            self._require_administrator(caller, "reset election")
            if self._status != WorkflowStatus.VOTES_TALLIED:
                raise self._reject(
                    InvalidTransitionError,
                    f"Cannot reset during {self._status.name}; "
                    f"requires {WorkflowStatus.VOTES_TALLIED.name}",
                )
            now = self._clock.now()
            ready_at = self._tally_timestamp + self.reset_cooldown_seconds
            if now < ready_at:
                raise self._reject(
                    TooEarlyError,
                    f"Reset available in {ready_at - now:.1f}s "
                    f"(cooldown {self.reset_cooldown_seconds}s after tally)",
                )

            for identity in self._registered_voter_ids:
                self._voters[identity].clear()
            cleared = len(self._registered_voter_ids)
            self._registered_voter_ids = []
            self._proposals = []
            self._tied_winner_ids = []
            self._winner_id = 0
            self._any_vote_cast = False
            self._tally_timestamp = None
            self._status = INITIAL_STATUS

            logger.info(
                f"Election reset: {cleared} voter(s) cleared, "
                f"status={self._status.name}"
            )
            return self._emit(ElectionReset(timestamp=now))

    def cooldown_remaining(self) -> Optional[float]:
        """Seconds until reset is allowed; None before the round is tallied."""
        with self._lock:
            if self._status != WorkflowStatus.VOTES_TALLIED:
                return None
            ready_at = self._tally_timestamp + self.reset_cooldown_seconds
            return max(0.0, ready_at - self._clock.now())

    # ── Registry & voting ─────────────────────────────────────────────

    def register_voter(self, caller: str, identity: str) -> VoterRegistered:
        with self._lock:
            self._require_administrator(caller, "register voter")
            self._require_status(WorkflowStatus.REGISTERING_VOTERS, "register voters")
            if not isinstance(identity, str) or not VALID_IDENTITY_PATTERN.match(identity):
                raise self._reject(InvalidIdentityError, f"Invalid voter identity {identity!r}")

            voter = self._voters.get(identity)
            if voter is not None and voter.is_registered:
                raise self._reject(AlreadyRegisteredError, f"voter {identity} is already registered")

            if voter is None:
                voter = self._voters[identity] = Voter()
            voter.is_registered = True
            self._registered_voter_ids.append(identity)

            logger.info(f"Registered voter {identity}")
            return self._emit(VoterRegistered(voter=identity, timestamp=self._clock.now()))

    def submit_proposal(self, caller: str, description: str) -> ProposalRegistered:
        with self._lock:
            self._require_voter(caller, "submit proposal")
            self._require_status(
                WorkflowStatus.PROPOSALS_REGISTRATION_STARTED, "submit proposals"
            )
            if not isinstance(description, str) or not description.strip():
                raise self._reject(InvalidProposalError, "Proposal description cannot be empty")

            self._proposals.append(Proposal(description=description))
            proposal_id = len(self._proposals) - 1

            logger.info(
                f"Registered proposal #{proposal_id} from voter {caller}: "
                f"{_shorten(description)!r}"
            )
            return self._emit(ProposalRegistered(
                proposal_id=proposal_id, timestamp=self._clock.now()
            ))

    def vote(self, caller: str, proposal_id: int) -> VoteCast:
        with self._lock:
            voter = self._require_voter(caller, "vote")
            self._require_status(WorkflowStatus.VOTING_SESSION_STARTED, "vote")
            proposal = self._require_proposal(proposal_id)
            if voter.has_voted:
                raise self._reject(
                    AlreadyVotedError,
                    f"voter {caller} already voted for proposal #{voter.voted_proposal_id}",
                )

            proposal.vote_count += 1
            voter.has_voted = True
            voter.voted_proposal_id = proposal_id
            self._any_vote_cast = True

            logger.info(f"Vote: voter {caller} → proposal #{proposal_id}")
            return self._emit(VoteCast(
                voter=caller, proposal_id=proposal_id, timestamp=self._clock.now()
            ))

    # ── Queries ───────────────────────────────────────────────────────

    def get_status(self) -> WorkflowStatus:
        with self._lock:
            return self._status

    @property
    def status(self) -> WorkflowStatus:
        return self.get_status()

    def get_voter_info(self, identity: str) -> Voter:
        """Voter record for any identity; unknown identities read as unregistered."""
        with self._lock:
            voter = self._voters.get(identity) if isinstance(identity, str) else None
            return voter.copy() if voter is not None else Voter()

    def get_proposal(self, caller: str, proposal_id: int) -> Proposal:
        with self._lock:
            self._require_voter(caller, "read proposal")
            return self._require_proposal(proposal_id).copy()

    def get_vote_of(self, caller: str, identity: str) -> int:
        """Proposal index *identity* voted for. Votes are not secret."""
        with self._lock:
            self._require_voter(caller, "read vote")
            voter = self._voters.get(identity) if isinstance(identity, str) else None
            if voter is None or not voter.has_voted:
                raise self._reject(HasNotVotedError, f"voter {identity} has not voted")
            return voter.voted_proposal_id

    def get_winner(self) -> int:
        with self._lock:
            self._require_status(WorkflowStatus.VOTES_TALLIED, "read winner")
            if not self._any_vote_cast:
                raise self._reject(NoVotesCastError, "No votes were cast this round")
            return self._winner_id

    @property
    def proposal_count(self) -> int:
        with self._lock:
            return len(self._proposals)

    @property
    def registered_voter_ids(self) -> List[str]:
        with self._lock:
            return list(self._registered_voter_ids)

    @property
    def tied_winner_ids(self) -> List[int]:
        with self._lock:
            return list(self._tied_winner_ids)

    @property
    def tally_timestamp(self) -> Optional[float]:
        with self._lock:
            return self._tally_timestamp

    @property
    def any_vote_cast(self) -> bool:
        with self._lock:
            return self._any_vote_cast

    @property
    def events(self) -> List[ElectionEvent]:
        with self._lock:
            return list(self._events)

    def drain_events(self) -> List[ElectionEvent]:
        """Return the notification log and empty it."""
        with self._lock:
            drained, self._events = self._events, []
            return drained

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            tallied = self._status == WorkflowStatus.VOTES_TALLIED
            return {
                "status": self._status.name,
                "registeredVoters": list(self._registered_voter_ids),
                "voters": {
                    identity: self._voters[identity].to_dict()
                    for identity in self._registered_voter_ids
                },
                "proposals": [p.to_dict() for p in self._proposals],
                "tiedWinnerIds": list(self._tied_winner_ids),
                "winnerId": self._winner_id if tallied and self._any_vote_cast else None,
                "anyVoteCast": self._any_vote_cast,
                "tallyTimestamp": self._tally_timestamp,
                "resetCooldownSeconds": self.reset_cooldown_seconds,
            }

    def __repr__(self) -> str:
        return (
            f"<ElectionEngine status={self._status.name} "
            f"voters={len(self._registered_voter_ids)} "
            f"proposals={len(self._proposals)}>"
        )
