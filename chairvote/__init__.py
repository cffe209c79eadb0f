"""Chairvote - a library for running chaired single-vote elections.

A Chairvote election is run by a single administrator, the chairman, over a
fixed roster of candidates. Every eligible identity may cast one vote per
round, within a time window the chairman opens and closes:

-   The election is set up by :func:`configure_election`, which binds the
    chairman to the creating caller and fixes the roster and the voting
    policy (the :class:`ElectionConfig` from the ``config`` module).
-   The chairman sets the voting period, starts the voting, grants voting
    rights and ends the voting once the period elapsed; the phases are
    handled by the ``period`` module.
-   Participants vote for a candidate by its roster index; the ``eligibility``
    module makes sure each votes at most once per round.
-   At the end, the ``tally`` module determines the winner or detects a tie.

All of this is coordinated by the :class:`ElectionCoordinator` from the
``coordinator`` module, which checks every request in a fixed order, applies
it atomically and records an event for everything that happened (see the
``events`` module).
"""

from chairvote.config import ElectionConfig
from chairvote.coordinator import ElectionCoordinator, configure_election
from chairvote.errors import (
    ElectionError, ConfigurationError, AccessError, StateError,
    AlreadyGranted, AlreadyVoted, CandidateIndexError
)
from chairvote.period import Phase
from chairvote.tally import Outcome, compute_outcome
