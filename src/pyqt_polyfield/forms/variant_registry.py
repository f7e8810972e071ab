"""
Per-contract variant registry.

Catalogs the concrete implementations (variants) of a contract type from an
explicit registration table instead of scanning every loaded type.

Design:
- VARIANT_REGISTRATIONS: contract -> candidate VariantEntry list, filled at
  class-definition time (ContractMeta) or by register_variant()
- Variant sources (modules, entry points) are imported lazily at build time;
  a failing source is logged as a DiscoveryError and skipped
- get_variant_registry() builds a VariantRegistry once per contract and
  caches it; the registry is immutable afterwards
"""

from dataclasses import dataclass, field
from importlib import import_module
from importlib.metadata import entry_points
from typing import Any, Callable, Dict, List, Optional, Set, Tuple
import inspect
import logging

from pyqt_polyfield.exceptions import DiscoveryError
from pyqt_polyfield.protocols.form_config import get_polyfield_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariantEntry:
    """One registered implementation of a contract.

    Attributes:
        variant_type: The concrete class
        name: Declared class name, before any display post-processing
        factory: Zero-argument callable producing a fresh instance
        is_default: Explicit default flag set at registration time
    """
    variant_type: type
    name: str
    factory: Callable[[], Any] = field(compare=False)
    is_default: bool = False

    @property
    def identifier(self) -> str:
        """Stable identifier used by selection commands."""
        return f"{self.variant_type.__module__}.{self.variant_type.__qualname__}"

    def create(self) -> Any:
        """Invoke the factory. Exceptions propagate to the caller."""
        return self.factory()


@dataclass(frozen=True)
class VariantRegistry:
    """Immutable catalog of the variants of one contract."""
    contract: type
    entries: Tuple[VariantEntry, ...]
    default_entry: Optional[VariantEntry]
    discovery_errors: Tuple[DiscoveryError, ...] = ()

    def count(self) -> int:
        return len(self.entries)

    def variants(self) -> Tuple[VariantEntry, ...]:
        """Variants in registration order."""
        return self.entries

    def default(self) -> Optional[VariantEntry]:
        return self.default_entry

    def find(self, identifier: str) -> Optional[VariantEntry]:
        """Look up a variant by VariantEntry.identifier."""
        for entry in self.entries:
            if entry.identifier == identifier:
                return entry
        return None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


# Candidate registrations, maps contract -> entries in registration order
VARIANT_REGISTRATIONS: Dict[type, List[VariantEntry]] = {}

# Modules imported before a contract's registry is built, maps contract -> module names
VARIANT_SOURCES: Dict[type, List[str]] = {}

# Built registries, one per contract
_registries: Dict[type, VariantRegistry] = {}

# Contracts whose registry is being built right now
_building: Set[type] = set()

# Sources already imported in this process
_loaded_sources: Set[str] = set()
_entry_points_loaded = False


def add_candidate(contract: type, entry: VariantEntry) -> None:
    """Append a candidate variant to a contract's registration table."""
    if contract in _registries:
        logger.warning(
            f"{entry.name} registered for {contract.__name__} after its registry was built; "
            f"ignored until reset_registries()"
        )
    VARIANT_REGISTRATIONS.setdefault(contract, []).append(entry)
    logger.debug(f"Registered candidate {entry.name} for {contract.__name__} (default={entry.is_default})")


def register_variant(
    contract: type,
    variant_type: Optional[type] = None,
    *,
    name: Optional[str] = None,
    factory: Optional[Callable[[], Any]] = None,
    default: bool = False,
):
    """
    Register a variant of a contract explicitly.

    Usable directly or as a class decorator:

        @register_variant(NameGenerator, default=True)
        class StandardNameGenerator:
            ...

        register_variant(NameGenerator, SyllableNameGenerator, factory=make_syllables)

    Args:
        contract: The contract type the variant implements
        variant_type: The variant class (omit when used as a decorator)
        name: Name override, defaults to the class name
        factory: Zero-argument factory, defaults to the class itself
        default: Mark the variant as the contract's default
    """
    def decorator(cls: type) -> type:
        add_candidate(contract, VariantEntry(
            variant_type=cls,
            name=name or cls.__name__,
            factory=factory or cls,
            is_default=default,
        ))
        return cls

    if variant_type is not None:
        return decorator(variant_type)
    return decorator


def register_variant_source(contract: type, module_name: str) -> None:
    """Import module_name before building the contract's registry."""
    VARIANT_SOURCES.setdefault(contract, []).append(module_name)


def get_variant_registry(contract: type) -> VariantRegistry:
    """
    Get the registry for a contract, building it on first use.

    Raises:
        RuntimeError: If called for a contract while its own build is running
    """
    registry = _registries.get(contract)
    if registry is not None:
        return registry

    if contract in _building:
        raise RuntimeError(f"Reentrant registry build for contract {contract.__name__}")

    _building.add(contract)
    try:
        registry = _build_registry(contract)
    finally:
        _building.discard(contract)

    _registries[contract] = registry
    return registry


def reset_registries() -> None:
    """Drop every built registry so the next lookup rebuilds it."""
    _registries.clear()


def clear_registrations() -> None:
    """Drop registries, candidates and sources (test isolation)."""
    global _entry_points_loaded
    _registries.clear()
    VARIANT_REGISTRATIONS.clear()
    VARIANT_SOURCES.clear()
    _loaded_sources.clear()
    _entry_points_loaded = False


def _build_registry(contract: type) -> VariantRegistry:
    errors = _load_sources(contract)

    entries: List[VariantEntry] = []
    seen: Set[type] = set()
    for candidate in VARIANT_REGISTRATIONS.get(contract, []):
        variant_type = candidate.variant_type
        if variant_type in seen:
            logger.debug(f"Skipping duplicate registration of {candidate.name}")
            continue
        if not is_eligible_variant(variant_type, contract):
            logger.debug(f"Skipping {candidate.name} - abstract, generic or not a {contract.__name__}")
            continue
        seen.add(variant_type)
        entries.append(candidate)

    default_entry = resolve_default(entries)
    logger.debug(
        f"Built registry for {contract.__name__}: {[e.name for e in entries]}, "
        f"default={default_entry.name if default_entry else None}"
    )
    return VariantRegistry(contract, tuple(entries), default_entry, tuple(errors))


def resolve_default(entries: List[VariantEntry]) -> Optional[VariantEntry]:
    """
    First entry marked default; else the first entry; else None.

    A marked entry wins regardless of its position or of whether another
    candidate was chosen before it.
    """
    marked = [entry for entry in entries if entry.is_default]
    if len(marked) > 1:
        logger.warning(
            f"Several default variants registered: {[e.name for e in marked]}. "
            f"Using {marked[0].name}."
        )
    if marked:
        return marked[0]
    return entries[0] if entries else None


def is_eligible_variant(variant_type: type, contract: type) -> bool:
    """Concrete, non-generic and assignable to contract."""
    if not isinstance(variant_type, type):
        return False
    if inspect.isabstract(variant_type) or getattr(variant_type, "_is_protocol", False):
        return False
    if getattr(variant_type, "__parameters__", ()):
        return False
    try:
        return issubclass(variant_type, contract)
    except TypeError:
        # Protocols that are not runtime_checkable only support nominal checks
        return contract in variant_type.__mro__


def _load_sources(contract: type) -> List[DiscoveryError]:
    errors: List[DiscoveryError] = []

    for module_name in VARIANT_SOURCES.get(contract, []):
        if module_name in _loaded_sources:
            continue
        error = _load_source(module_name, lambda: import_module(module_name))
        if error is None:
            _loaded_sources.add(module_name)
        else:
            errors.append(error)

    errors.extend(_load_entry_points())
    return errors


def _load_entry_points() -> List[DiscoveryError]:
    global _entry_points_loaded
    if _entry_points_loaded:
        return []
    _entry_points_loaded = True

    errors: List[DiscoveryError] = []
    group = get_polyfield_config().entry_point_group
    for entry_point in entry_points(group=group):
        error = _load_source(f"{group}:{entry_point.name}", entry_point.load)
        if error is not None:
            errors.append(error)
    return errors


def _load_source(source: str, load: Callable[[], Any]) -> Optional[DiscoveryError]:
    """
    Run one source loader.

    A source that fails partway has its registrations withdrawn, so none of
    its classes reach a registry.
    """
    marks = {contract: len(entries) for contract, entries in VARIANT_REGISTRATIONS.items()}
    try:
        load()
    except Exception as exc:
        _withdraw_registrations(marks, source)
        return _discovery_failed(source, exc)
    return None


def _withdraw_registrations(marks: Dict[type, int], source: str) -> None:
    for contract in list(VARIANT_REGISTRATIONS):
        entries = VARIANT_REGISTRATIONS[contract]
        keep = marks.get(contract, 0)
        if len(entries) > keep:
            logger.debug(
                f"Withdrawing {[e.name for e in entries[keep:]]} for {contract.__name__} "
                f"registered by failed source '{source}'"
            )
            del entries[keep:]
        if not entries:
            del VARIANT_REGISTRATIONS[contract]


def _discovery_failed(source: str, exc: Exception) -> DiscoveryError:
    error = DiscoveryError(source, exc)
    logger.warning(f"{error}; continuing with remaining sources")
    return error
