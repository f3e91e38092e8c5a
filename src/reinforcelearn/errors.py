from __future__ import annotations


class InvalidArgumentError(ValueError):
    """
    Raised when a caller passes an argument that the receiving object cannot accept.

    Typical cases:
    - sampling a replay batch larger than the number of stored transitions
    - stepping an environment with an action outside its action space
    - looking up a value for an out-of-range state or action index
    - building a config / policy / environment with out-of-range parameters

    It subclasses ValueError, so code that already catches ValueError keeps working.
    """
