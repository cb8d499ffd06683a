"""Exceptions raised by fnkit."""


class CallerContractViolation(ValueError):
    """
    Raised when a caller hands a primitive input it cannot accept.

    Examples: reducing an empty collection without a seed, memoizing a call
    with a non-primitive argument, or passing a collection type that is
    neither a sequence nor a mapping.

    Failures raised by caller-supplied callbacks are never wrapped in this
    type; they propagate unchanged.
    """
