"""Skip policy evaluation.

Instance numbers are 1-based here, matching the badges shown in the UI.
Number 1 is the anchor and is never skipped.
"""

from __future__ import annotations

from circlr.core.layout.errors import PluginErrorCode, SkipPolicyViolation
from circlr.core.layout.models import (
    EveryNthSkip,
    LayoutParameters,
    NoSkip,
    SkipPolicy,
    SpecificSkip,
)

ANCHOR_NUMBER = 1

# Anchor plus at least one other instance
MIN_VISIBLE = 2


def resolve_skipped(params: LayoutParameters) -> frozenset[int]:
    """Return the 1-based instance numbers hidden by the skip policy.

    The result is always a subset of ``[2, count]``.

    Example:
        >>> params = LayoutParameters(count=8, radius=10, skip_policy=EveryNthSkip(n=2))
        >>> sorted(resolve_skipped(params))
        [2, 4, 6, 8]
    """
    policy = params.skip_policy
    if isinstance(policy, SpecificSkip):
        return frozenset(i for i in policy.indices if ANCHOR_NUMBER < i <= params.count)
    if isinstance(policy, EveryNthSkip):
        return frozenset(i for i in range(2, params.count + 1) if i % policy.n == 0)
    return frozenset()


def is_skipped(params: LayoutParameters, number: int) -> bool:
    """Whether 1-based instance ``number`` is hidden."""
    return number in resolve_skipped(params)


def check_skip_policy(params: LayoutParameters) -> PluginErrorCode | None:
    """Return the violation a policy would cause, if any.

    ``resolve_skipped`` silently drops the anchor; callers use this check to
    tell the user why their input was reverted.
    """
    policy = params.skip_policy
    if isinstance(policy, SpecificSkip) and ANCHOR_NUMBER in policy.indices:
        return PluginErrorCode.CANT_SKIP_FIRST_INDEX
    if params.count - len(resolve_skipped(params)) < MIN_VISIBLE:
        return PluginErrorCode.CANT_SKIP_ALL
    return None


def enforce_skip_policy(params: LayoutParameters) -> None:
    """Raise ``SkipPolicyViolation`` if the policy is not acceptable."""
    code = check_skip_policy(params)
    if code is not None:
        raise SkipPolicyViolation(code)


def toggle_skip_index(policy: SkipPolicy, number: int) -> SpecificSkip:
    """Toggle ``number`` in a specific skip set (clicking an item in the preview).

    Any other policy is replaced by a specific one.
    """
    indices = set(policy.indices) if isinstance(policy, SpecificSkip) else set()
    if number in indices:
        indices.discard(number)
    else:
        indices.add(number)
    return SpecificSkip(indices=frozenset(indices))


def describe_policy(policy: SkipPolicy) -> str:
    """Short human-readable summary of a policy."""
    if isinstance(policy, SpecificSkip):
        if not policy.indices:
            return "skip none"
        return "skip " + ",".join(str(i) for i in sorted(policy.indices))
    if isinstance(policy, EveryNthSkip):
        return f"skip every {policy.n}"
    if isinstance(policy, NoSkip):
        return "skip none"
    raise TypeError(f"Unknown skip policy: {type(policy).__name__}")
