"""
Held order storage.

Held orders must survive a restart of the register, so production uses
ValkeyHeldOrderStore: the whole list lives under one fixed key as a JSON
array of {id, name, timestamp, cart}, in hold order. Tests use
InMemoryHeldOrderStore.
"""

import logging
from typing import Protocol

from pydantic import TypeAdapter

from clients.valkey_client import ValkeyClient
from core.models import HeldOrder

logger = logging.getLogger(__name__)

_held_orders_adapter = TypeAdapter(list[HeldOrder])


class HeldOrderStore(Protocol):
    """Repository of held orders, oldest first."""

    def list_all(self) -> list[HeldOrder]: ...

    def get(self, hold_id: str) -> HeldOrder | None: ...

    def add(self, held_order: HeldOrder) -> None: ...

    def remove(self, hold_id: str) -> bool: ...


class InMemoryHeldOrderStore:
    """Held orders kept in process memory (lost on restart)."""

    def __init__(self, held_orders: list[HeldOrder] | None = None):
        self._held: list[HeldOrder] = list(held_orders or [])

    def list_all(self) -> list[HeldOrder]:
        return list(self._held)

    def get(self, hold_id: str) -> HeldOrder | None:
        for held in self._held:
            if held.id == hold_id:
                return held
        return None

    def add(self, held_order: HeldOrder) -> None:
        self._held.append(held_order)

    def remove(self, hold_id: str) -> bool:
        before = len(self._held)
        self._held = [held for held in self._held if held.id != hold_id]
        return len(self._held) < before


class ValkeyHeldOrderStore:
    """
    Held orders persisted as a JSON array under a single Valkey key.

    Every write rewrites the array. Reads re-hydrate timestamps and money
    fields through the HeldOrder model.
    """

    def __init__(self, valkey: ValkeyClient, key: str):
        self._valkey = valkey
        self._key = key

    def _load(self) -> list[HeldOrder]:
        data = self._valkey.get_json(self._key)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array in key '{self._key}'")
        return _held_orders_adapter.validate_python(data)

    def _save(self, held_orders: list[HeldOrder]) -> None:
        self._valkey.set_json(
            self._key,
            [held.model_dump(mode="json", by_alias=True) for held in held_orders],
        )

    def list_all(self) -> list[HeldOrder]:
        return self._load()

    def get(self, hold_id: str) -> HeldOrder | None:
        for held in self._load():
            if held.id == hold_id:
                return held
        return None

    def add(self, held_order: HeldOrder) -> None:
        held_orders = self._load()
        held_orders.append(held_order)
        self._save(held_orders)
        logger.info("Persisted held order %s (%d held)", held_order.id, len(held_orders))

    def remove(self, hold_id: str) -> bool:
        held_orders = self._load()
        remaining = [held for held in held_orders if held.id != hold_id]
        if len(remaining) == len(held_orders):
            return False
        self._save(remaining)
        return True
