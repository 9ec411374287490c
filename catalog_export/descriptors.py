"""Declarative field descriptors and per-invocation field resolution.

A descriptor list describes how a record type turns into columns (or
elements). Resolution against the current ``ModeFlags`` happens exactly
once per export call, before anything is written:

    fields = resolve(product_fields(...), flags)

Header and row generation both iterate the resolved tuple, so they cannot
disagree about which columns exist.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, Sequence, Tuple, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")

# Ordered (code, label) pairs.
Domain = Tuple[Tuple[Any, str], ...]


def make_domain(pairs: Iterable[Tuple[Any, str]]) -> Domain:
    """Freeze an iterable of (code, label) pairs into a ``Domain``."""
    return tuple((code, str(label)) for code, label in pairs)


def domain_fingerprint(domain: Domain) -> Tuple[Tuple[str, Any, str], ...]:
    """Structural identity of a domain.

    Codes are tagged with their type name so ``1`` and ``"1"`` (or ``True``)
    never collapse into the same allocation.
    """
    return tuple((type(code).__name__, code, label) for code, label in domain)


@dataclass(frozen=True)
class FieldDescriptor(Generic[T]):
    """One exportable column/field of record type ``T``.

    ``toggle`` names the per-field setting that gates inclusion; ``None``
    means the field is always exported.
    """

    name: str
    accessor: Callable[[T], Any]
    toggle: Optional[str] = None
    domain: Domain = ()
    allow_blank: bool = False
    layout_offset: int = 0

    @property
    def has_domain(self) -> bool:
        return bool(self.domain)


@dataclass(frozen=True)
class ModeFlags:
    """Mode/feature flags consumed by the inclusion policy.

    ``toggles`` must contain every toggle name any descriptor refers to.
    """

    advanced_mode: bool = False
    toggles: Mapping[str, bool] = field(default_factory=dict)

    def enabled(self, toggle: str) -> bool:
        if toggle not in self.toggles:
            raise ConfigurationError(f"Unknown field toggle: {toggle!r}")
        return bool(self.toggles[toggle])


class ConditionalFieldPolicy:
    """Decides which descriptors take part in one export invocation.

    A gated field is included when advanced mode is on or its toggle is
    enabled. Evaluation is pure: the same flags and list always give the
    same result.
    """

    def __init__(self, flags: ModeFlags):
        self.flags = flags

    def includes(self, descriptor: FieldDescriptor[Any]) -> bool:
        if descriptor.toggle is None:
            return True
        # Validate the toggle name even in advanced mode.
        enabled = self.flags.enabled(descriptor.toggle)
        return self.flags.advanced_mode or enabled

    def includes_group(self, toggle: Optional[str]) -> bool:
        """Same rule for nested groups (markup collections) gated by a toggle."""
        if toggle is None:
            return True
        enabled = self.flags.enabled(toggle)
        return self.flags.advanced_mode or enabled

    def resolve(self, descriptors: Sequence[FieldDescriptor[T]]) -> Tuple[FieldDescriptor[T], ...]:
        check_unique_names(descriptors)
        return tuple(d for d in descriptors if self.includes(d))


def check_unique_names(descriptors: Sequence[FieldDescriptor[Any]]) -> None:
    seen: set[str] = set()
    for descriptor in descriptors:
        if descriptor.name in seen:
            raise ConfigurationError(f"Duplicate field name: {descriptor.name!r}")
        seen.add(descriptor.name)


def resolve(
    descriptors: Sequence[FieldDescriptor[T]], flags: ModeFlags
) -> Tuple[FieldDescriptor[T], ...]:
    """Filter ``descriptors`` for one export invocation."""
    return ConditionalFieldPolicy(flags).resolve(descriptors)


def block_offset(descriptors: Sequence[FieldDescriptor[Any]]) -> int:
    """Common ``layout_offset`` of a detail descriptor list."""
    offsets = {d.layout_offset for d in descriptors}
    if len(offsets) > 1:
        raise ConfigurationError(
            f"Detail fields disagree on layout offset: {sorted(offsets)}"
        )
    offset = offsets.pop() if offsets else 0
    if offset < 0:
        raise ConfigurationError(f"Negative layout offset: {offset}")
    return offset
