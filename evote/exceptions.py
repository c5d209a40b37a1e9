"""
evote Exceptions

Every rejection raised by the election engine. Each one is a synchronous
refusal of the attempted operation; the engine state is left untouched.
"""


class ElectionError(Exception):
    """Base exception for evote."""
    pass


class NotAuthorizedError(ElectionError):
    """Caller lacks the required role (administrator or registered voter)."""
    pass


class PhaseViolationError(ElectionError):
    """Operation attempted outside its legal workflow phase."""
    pass


class InvalidTransitionError(ElectionError):
    """Phase change requested from a phase that needs tally or reset instead."""
    pass


class InvalidIdentityError(ElectionError):
    """Empty or malformed identity supplied to registration."""
    pass


class AlreadyRegisteredError(ElectionError):
    """Identity is already on the voter whitelist."""
    pass


class AlreadyVotedError(ElectionError):
    """Voter already cast a vote this round."""
    pass


class UnknownProposalError(ElectionError):
    """Proposal index is out of range."""
    pass


class InvalidProposalError(ElectionError):
    """Proposal description is empty."""
    pass


class HasNotVotedError(ElectionError):
    """Queried voter has not cast a vote."""
    pass


class NoVotesCastError(ElectionError):
    """Winner requested for a round in which nobody voted."""
    pass


class TooEarlyError(ElectionError):
    """Reset attempted before the cooldown elapsed."""
    pass


class ConfigurationError(ElectionError):
    """Configuration error."""
    pass
