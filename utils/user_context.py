"""Propagate the signed-in cashier through the call stack using contextvars."""

from contextlib import contextmanager
from contextvars import ContextVar

from auth.exceptions import NotAuthenticatedError
from auth.types import Actor

_current_actor: ContextVar[Actor | None] = ContextVar("current_actor", default=None)


def get_current_actor() -> Actor | None:
    """
    Get the signed-in cashier, or None when nobody is signed in.

    Code paths that cannot proceed without a cashier (checkout) should
    use require_current_actor() instead.
    """
    return _current_actor.get()


def require_current_actor() -> Actor:
    """
    Get the signed-in cashier.

    Raises NotAuthenticatedError if no actor context is set.
    """
    actor = _current_actor.get()
    if actor is None:
        raise NotAuthenticatedError("User not authenticated")
    return actor


def set_current_actor(actor: Actor) -> None:
    """
    Set the signed-in cashier in context.

    Called by the register surface once the back office has authenticated
    the cashier.
    """
    _current_actor.set(actor)


def clear_current_actor() -> None:
    """
    Clear actor context.

    Must be called in finally block to prevent context leakage.
    """
    _current_actor.set(None)


@contextmanager
def actor_context(actor: Actor):
    """
    Context manager for temporarily setting the signed-in cashier.

    Useful for:
    - Tests
    - Running a register command on behalf of a specific cashier

    Example:
        with actor_context(cashier):
            order_id = checkout.checkout("cash", Decimal("20.00"))
    """
    previous = _current_actor.get()
    set_current_actor(actor)
    try:
        yield
    finally:
        if previous is None:
            clear_current_actor()
        else:
            set_current_actor(previous)
