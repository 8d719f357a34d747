"""
Exceptions raised by exploration collaborators.
"""


class ExplorationError(Exception):
    """Base class for exploration errors."""


class CollaboratorUnavailable(ExplorationError):
    """A pose, map, search or goal collaborator could not answer in time.

    The controller treats this as a skipped tick and retries on the next one.
    """
