from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Mapping

from kubernetes.utils.quantity import parse_quantity

from simctl.common.errors import QuantityError


@dataclass(frozen=True, eq=False)
class Quantity:
    """A resource quantity keeping the string it was written as."""

    raw: str
    value: Decimal

    @classmethod
    def parse(cls, raw: str, resource: str = "") -> "Quantity":
        text = str(raw).strip()
        if not text:
            raise QuantityError(resource, raw, "empty value")
        try:
            value = parse_quantity(text)
        except (ValueError, ArithmeticError) as exc:
            raise QuantityError(resource, raw, str(exc)) from exc
        if not value.is_finite():
            raise QuantityError(resource, raw, "value is not a finite number")
        return cls(raw=text, value=value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.raw


ResourceList = Dict[str, Quantity]


def build_resources(resources: Mapping[str, str]) -> ResourceList:
    """Parse every entry of ``resources``; one bad value fails the whole set."""

    return {name: Quantity.parse(value, name) for name, value in resources.items()}


def render_resources(resources: Mapping[str, Quantity]) -> Dict[str, str]:
    return {name: quantity.raw for name, quantity in resources.items()}


__all__ = ["Quantity", "ResourceList", "build_resources", "render_resources"]
