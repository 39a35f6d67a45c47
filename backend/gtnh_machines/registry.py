from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .machine import Machine, single_block_machine_for

logger = logging.getLogger("gtnh_machines.registry")


class MachineRegistry:
    """Machine name -> behavior bundle, built once and then read-only.

    Several names may share one :class:`Machine`. Registering a name twice
    replaces the earlier entry but keeps its original position.
    """

    def __init__(self) -> None:
        self._machines: Dict[str, Machine] = {}
        self._frozen = False

    def register(self, machine: Machine, *names: str) -> Machine:
        if self._frozen:
            raise RuntimeError("Machine registry is frozen")
        if not names:
            raise ValueError("At least one machine name is required")
        for name in names:
            if name in self._machines:
                logger.debug("machine %s re-registered; last registration wins", name)
            self._machines[name] = machine
        return machine

    def alias(self, name: str, existing: str) -> Machine:
        return self.register(self[existing], name)

    def freeze(self) -> "MachineRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Optional[Machine]:
        return self._machines.get(name)

    def lookup(self, name: str, recipe_type: str = "") -> Machine:
        machine = self._machines.get(name)
        if machine is None:
            return single_block_machine_for(recipe_type)
        return machine

    def names(self) -> List[str]:
        return list(self._machines)

    def items(self) -> Iterable[Tuple[str, Machine]]:
        return list(self._machines.items())

    def __getitem__(self, name: str) -> Machine:
        try:
            return self._machines[name]
        except KeyError:
            raise KeyError(f"Unknown machine: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._machines

    def __len__(self) -> int:
        return len(self._machines)
