"""
Lifecycle contract for materialized controls.

A control descriptor is an immutable value produced once by the compiler.
A ``ControlInstance`` is its live companion, owned by a rendering adapter:
it can be attached (materialized into a visual node) and detached any
number of times, but never attached again while it is live.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from samlui.core import ir
from samlui.core.errors import UnsupportedMutation
from samlui.core.items import ChangeCallback, Subscription, ValueItem

logger = logging.getLogger(__name__)

NodeT = TypeVar("NodeT")


class ControlInstance(ABC, Generic[NodeT]):
    """
    Live companion of one control descriptor.

    Subclasses implement ``materialize`` to build the visual node, register
    child instances with ``adopt`` and observe items with ``watch``; both are
    released again on ``detach``.
    """

    def __init__(self, descriptor: ir.ControlDescriptor):
        self.descriptor = descriptor
        self.node: NodeT | None = None
        self.children: list[ControlInstance[NodeT]] = []
        self._subscriptions: list[Subscription] = []

    def __repr__(self) -> str:
        state = "attached" if self.is_attached else "detached"
        return f"{type(self).__name__}({self.descriptor.kind}, {state})"

    @property
    def is_attached(self) -> bool:
        return self.node is not None

    def attach(self) -> NodeT:
        """
        Materialize the descriptor and return the visual node.

        A failure inside ``materialize`` releases whatever was adopted or
        watched before it, leaving the instance detached.

        Raises:
            UnsupportedMutation: If the instance is still live; detach first
        """
        if self.children:
            raise UnsupportedMutation(
                f"{self.descriptor.kind} still holds {len(self.children)} live child control(s); "
                "detach before attaching again"
            )
        if self.node is not None:
            raise UnsupportedMutation(f"{self.descriptor.kind} is already attached")

        try:
            self.node = self.materialize()
        except BaseException:
            logger.debug("Attaching %s failed, releasing partial state", self.descriptor.kind)
            self.detach()
            raise
        logger.debug("Attached %s", self.descriptor.kind)
        return self.node

    def detach(self) -> None:
        """Release the node, child instances and subscriptions. No-op when detached."""
        if self.node is None and not self.children and not self._subscriptions:
            return
        for child in self.children:
            child.detach()
        self.children.clear()
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        self.node = None
        logger.debug("Detached %s", self.descriptor.kind)

    def adopt(self, child: ControlInstance[NodeT]) -> NodeT:
        """Attach a child instance and track it for ``detach``."""
        node = child.attach()
        self.children.append(child)
        return node

    def watch(self, item: ValueItem, callback: ChangeCallback) -> Subscription:
        """Subscribe to ``item`` for as long as this instance stays attached."""
        subscription = item.subscribe(callback)
        self._subscriptions.append(subscription)
        return subscription

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    @abstractmethod
    def materialize(self) -> NodeT:
        """Build the visual node for ``descriptor``."""
        ...
