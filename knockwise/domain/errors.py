"""Domain errors surfaced to callers (the HTTP layer maps them to 400/404)."""


class KnockwiseError(Exception):
    """Base class for all domain errors."""


class ValidationError(KnockwiseError, ValueError):
    """Request is malformed, e.g. both or neither of agent/team given."""


class NotFoundError(KnockwiseError, LookupError):
    """A referenced user, team, zone or assignment does not exist."""

    def __init__(self, kind: str, entity_id: object):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found: {entity_id}")
