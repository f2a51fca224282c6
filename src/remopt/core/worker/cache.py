"""
Local cache
===========

Process-local projection of an experiment's remote state.

The cache maps result identifiers to parameter values and outcomes, and parameter
names to their remote setting identifiers. It is never edited in place: every change
builds a new :class:`CacheState` which replaces the previous one in a single
assignment, so a reader holding a state never observes a half-applied change.

"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from remopt.core.worker.job import PARAMS_ATOL, params_equal
from remopt.core.worker.outcome import Outcome

log = logging.getLogger(__name__)


def id_order(uid):
    """Sort key of result identifiers: numbers first, in numeric order"""
    if isinstance(uid, (int, float)):
        return (0, uid, "")
    return (1, 0, str(uid))


def _freeze(mapping):
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CacheState:
    """Immutable snapshot of the cache"""

    id_to_params: Mapping[Any, Dict[str, Any]] = field(
        default_factory=lambda: _freeze({})
    )
    id_to_outcome: Mapping[Any, Outcome] = field(default_factory=lambda: _freeze({}))
    setting_ids: Mapping[str, Any] = field(default_factory=lambda: _freeze({}))

    @property
    def ids(self):
        """Identifiers of all known jobs, sorted"""
        return sorted(self.id_to_params, key=id_order)


class LocalCache:
    """Holds the current :class:`CacheState`"""

    def __init__(self):
        self._state = CacheState()

    @property
    def state(self) -> CacheState:
        """Current snapshot"""
        return self._state

    def rebuild(self, id_to_params, id_to_outcome, setting_ids):
        """Replace the whole content of the cache"""
        self._state = CacheState(
            id_to_params=_freeze(id_to_params),
            id_to_outcome=_freeze(id_to_outcome),
            setting_ids=_freeze(setting_ids),
        )
        log.debug(
            "Cache rebuilt with %d jobs and %d settings",
            len(id_to_params),
            len(setting_ids),
        )

    def put(self, uid, params=None, outcome=None):
        """Record the parameter values and/or outcome of a job"""
        state = self._state
        id_to_params = state.id_to_params
        id_to_outcome = state.id_to_outcome

        if params is not None:
            id_to_params = _freeze({**id_to_params, uid: dict(params)})
        if outcome is not None:
            id_to_outcome = _freeze({**id_to_outcome, uid: outcome})

        self._state = CacheState(id_to_params, id_to_outcome, state.setting_ids)

    def remove(self, uid):
        """Forget a job. Unknown identifiers are ignored."""
        state = self._state
        id_to_params = {k: v for k, v in state.id_to_params.items() if k != uid}
        id_to_outcome = {k: v for k, v in state.id_to_outcome.items() if k != uid}
        self._state = CacheState(
            _freeze(id_to_params), _freeze(id_to_outcome), state.setting_ids
        )

    def find_id(self, params, atol=PARAMS_ATOL) -> Optional[Any]:
        """Return the identifier of the job with the given parameter values.

        When several jobs share the same values, the one with the lowest identifier
        is returned. Returns None if no job matches.
        """
        state = self._state
        matches = [
            uid
            for uid in state.ids
            if params_equal(state.id_to_params[uid], params, atol)
        ]
        if not matches:
            return None

        if len(matches) > 1:
            log.warning(
                "%d jobs share the parameter values %s, using job %s",
                len(matches),
                params,
                matches[0],
            )

        return matches[0]

    def pending_ids(self):
        """Identifiers of the jobs with an unreported outcome, sorted"""
        state = self._state
        return [
            uid
            for uid in state.ids
            if not state.id_to_outcome.get(uid, Outcome.unreported()).is_reported
        ]

    def best_id(self) -> Optional[Any]:
        """Identifier of the job with the highest outcome value.

        Unreported jobs and constraint violations are never selected. Ties go to the
        lowest identifier. Returns None if no job has an outcome value.
        """
        state = self._state
        best_uid = None
        best_value = None
        for uid in sorted(state.id_to_outcome, key=id_order):
            outcome = state.id_to_outcome[uid]
            if not outcome.has_value:
                continue
            if best_value is None or outcome.value > best_value:
                best_uid, best_value = uid, outcome.value

        return best_uid
