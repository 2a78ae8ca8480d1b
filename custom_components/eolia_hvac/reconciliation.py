"""Keep registered accessories aligned with the discovered air conditioners."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol

from .models import DeviceSnapshot, ReconciliationPlan, RegisteredAccessory
from .nickname import resolve_nickname

if TYPE_CHECKING:
    from .accessory import EoliaAccessory
    from .nickname import NicknameMap

_LOGGER = logging.getLogger(__name__)


class AccessoryRegistry(Protocol):
    """Host-side store of registered accessories."""

    def generate_uuid(self, seed: str) -> str:
        """Return the deterministic accessory UUID for ``seed``."""

    def register_accessories(self, accessories: list[RegisteredAccessory]) -> None:
        """Persist newly created accessories."""

    def unregister_accessories(self, accessories: list[RegisteredAccessory]) -> None:
        """Forget accessories whose device is gone."""

    def update_accessory_metadata(self, accessory: RegisteredAccessory) -> None:
        """Persist the device details of an existing accessory."""


ControllerFactory = Callable[[RegisteredAccessory], "EoliaAccessory"]


class ReconciliationEngine:
    """Add, update and remove accessories to match a device inventory.

    The engine owns the registered set and exactly one controller per
    accessory. A pass is not transactional: if the registry raises, the
    error propagates and the passes already run stay applied.
    """

    def __init__(
        self,
        registry: AccessoryRegistry,
        nickname_map: NicknameMap,
        controller_factory: ControllerFactory,
        accessories: Iterable[RegisteredAccessory] = (),
    ) -> None:
        """Initialize the engine.

        Args:
            registry: Host registry the plan is applied against.
            nickname_map: Rename table for new accessories.
            controller_factory: Creates the controller for a bound accessory.
            accessories: Accessories restored by the host before discovery.

        """
        self._registry = registry
        self._nickname_map = nickname_map
        self._controller_factory = controller_factory
        self.accessories: list[RegisteredAccessory] = list(accessories)
        self.controllers: dict[str, EoliaAccessory] = {}

    def reconcile(self, fetched: list[DeviceSnapshot]) -> ReconciliationPlan:
        """Run one reconciliation pass against ``fetched``.

        Args:
            fetched: Device inventory, in the order the client returned it.

        Returns:
            ReconciliationPlan describing what changed.

        """
        plan = ReconciliationPlan()
        _LOGGER.debug(
            "Reconciling %d accessories with %d devices",
            len(self.accessories),
            len(fetched),
        )

        self._unbind_stale(fetched, plan)

        for snapshot in fetched:
            self._match_or_create(snapshot, plan)

        self._remove_unbound(plan)

        _LOGGER.debug(
            "Reconciliation done: %d added, %d updated, %d removed",
            len(plan.added),
            len(plan.updated),
            len(plan.removed),
        )
        return plan

    def _find(self, uuid: str) -> RegisteredAccessory | None:
        return next(
            (accessory for accessory in self.accessories if accessory.uuid == uuid),
            None,
        )

    def _unbind_stale(
        self,
        fetched: list[DeviceSnapshot],
        plan: ReconciliationPlan,
    ) -> None:
        fetched_ids = {snapshot.appliance_id for snapshot in fetched}

        for accessory in self.accessories:
            if accessory.bound_device is None:
                continue

            if accessory.bound_device.appliance_id not in fetched_ids:
                accessory.bound_device = None
                plan.unbound.append(accessory)

    def _match_or_create(
        self,
        snapshot: DeviceSnapshot,
        plan: ReconciliationPlan,
    ) -> None:
        uuid = self._registry.generate_uuid(snapshot.appliance_id)
        existing = self._find(uuid)

        if existing is not None:
            _LOGGER.info(
                "Restoring existing accessory from cache: %s", existing.display_name
            )
            existing.bound_device = snapshot
            self._registry.update_accessory_metadata(existing)
            self._bind_controller(existing, snapshot)
            if existing not in plan.updated and existing not in plan.added:
                plan.updated.append(existing)
            return

        _LOGGER.info(
            'Adding new Air Conditioner "%s" model "%s"',
            snapshot.nickname,
            snapshot.product_code,
        )
        display_name = resolve_nickname(snapshot.nickname, self._nickname_map)
        accessory = RegisteredAccessory(
            uuid=uuid,
            display_name=display_name,
            bound_device=snapshot,
            nickname=display_name,
        )
        self._bind_controller(accessory, snapshot)
        self._registry.register_accessories([accessory])
        self.accessories.append(accessory)
        plan.added.append(accessory)

    def _bind_controller(
        self,
        accessory: RegisteredAccessory,
        snapshot: DeviceSnapshot,
    ) -> None:
        controller = self.controllers.get(accessory.uuid)
        if controller is None:
            self.controllers[accessory.uuid] = self._controller_factory(accessory)
        else:
            controller.bind(snapshot)

    def _remove_unbound(self, plan: ReconciliationPlan) -> None:
        stale = [
            accessory for accessory in self.accessories if accessory.bound_device is None
        ]
        if not stale:
            return

        for accessory in stale:
            _LOGGER.info('Removing Air Conditioner "%s"', accessory.display_name)
            self.accessories.remove(accessory)
            self.controllers.pop(accessory.uuid, None)

        self._registry.unregister_accessories(stale)
        plan.removed.extend(stale)
