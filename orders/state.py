"""Order state machines.

One transition table per order flow; each row is ``(action, source, target,
manual)``. ``manual`` actions may be requested through a status update; the
others are reachable only from their own service operation.
"""

from dataclasses import dataclass

from common.choices import OrderStatus
from common.exceptions import StateConflictError


@dataclass(frozen=True)
class Transition:
    action: str
    source: str
    target: str
    manual: bool = False


class StateMachine:
    def __init__(self, name: str, transitions: list[Transition]):
        self.name = name
        self.transitions = tuple(transitions)

    def apply(self, state: str, action: str) -> str:
        """Return the target state, or raise StateConflictError for an illegal pair."""
        for t in self.transitions:
            if t.source == state and t.action == action:
                return t.target
        raise StateConflictError(f"Action '{action}' is not allowed for an order in status {state}.")

    def transition_to(self, state: str, target: str) -> Transition:
        """Find the single manual action that moves ``state`` to ``target``."""
        for t in self.transitions:
            if t.source == state and t.target == target and t.manual:
                return t
        raise StateConflictError(f"Cannot change order status from {state} to {target}.")


WAREHOUSE_FLOW = StateMachine(
    "warehouse",
    [
        Transition("accept", OrderStatus.PENDING, OrderStatus.ACCEPTED, manual=True),
        Transition("assign_stock", OrderStatus.ACCEPTED, OrderStatus.IN_PROGRESS),
        Transition("ship", OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED),
        Transition("deliver", OrderStatus.COMPLETED, OrderStatus.DELIVERED),
        Transition("cancel", OrderStatus.PENDING, OrderStatus.CANCELLED),
    ],
)

GIG_FLOW = StateMachine(
    "gig",
    [
        Transition("start", OrderStatus.PENDING, OrderStatus.IN_PROGRESS, manual=True),
        Transition("deliver", OrderStatus.IN_PROGRESS, OrderStatus.DELIVERED, manual=True),
        Transition("complete", OrderStatus.DELIVERED, OrderStatus.COMPLETED, manual=True),
        Transition("cancel", OrderStatus.PENDING, OrderStatus.CANCELLED),
    ],
)
