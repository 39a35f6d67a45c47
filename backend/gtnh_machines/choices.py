from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence


class ChoiceError(ValueError):
    """A choice value lies outside its declared domain."""

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems = list(problems)
        super().__init__("Invalid machine choices: " + "; ".join(self.problems))


@dataclass(frozen=True)
class Choice:
    description: str
    options: Optional[Sequence[str]] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_discrete(self) -> bool:
        return self.options is not None

    @property
    def lower_bound(self) -> float:
        return self.min if self.min is not None else 0


def default_choice_value(choice: Choice) -> float:
    if choice.is_discrete:
        return 0
    return choice.lower_bound


def resolve_choices(specs: Mapping[str, Choice], raw: Optional[Mapping[str, float]]) -> Dict[str, float]:
    resolved: Dict[str, float] = dict(raw or {})
    for name, choice in specs.items():
        if resolved.get(name) is None:
            resolved[name] = default_choice_value(choice)
    return resolved


def choice_problems(specs: Mapping[str, Choice], choices: Mapping[str, float]) -> List[str]:
    problems: List[str] = []
    for name, choice in specs.items():
        value = choices.get(name)
        if value is None:
            problems.append(f"{name}: missing value")
            continue
        if not math.isfinite(value):
            problems.append(f"{name}: {value} is not a finite number")
            continue
        if choice.is_discrete:
            count = len(choice.options)
            if value != int(value) or not 0 <= value < count:
                problems.append(f"{name}: option index {value} not in [0, {count})")
            continue
        if value < choice.lower_bound:
            problems.append(f"{name}: {value} below minimum {choice.lower_bound}")
        elif choice.max is not None and value > choice.max:
            problems.append(f"{name}: {value} above maximum {choice.max}")
    return problems


def validate_choices(specs: Mapping[str, Choice], choices: Mapping[str, float]) -> None:
    problems = choice_problems(specs, choices)
    if problems:
        raise ChoiceError(problems)
