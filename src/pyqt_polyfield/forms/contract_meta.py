"""
Contract metaclass with variant auto-registration.

Variants register when their classes are defined, so the registry never
has to scan loaded modules for implementations.

Design:
- A class built by ContractMeta with no ContractMeta base is a contract
- contract=True declares a sub-contract further down the hierarchy
- Every other subclass becomes a candidate of each contract in its MRO
- default=True sets the explicit default flag of the registration
- Abstract and generic candidates are filtered when the registry is built
"""

from abc import ABCMeta
import logging

from pyqt_polyfield.forms.variant_registry import VariantEntry, add_candidate

logger = logging.getLogger(__name__)

CONTRACT_MARKER = '__polyfield_contract__'


class ContractMeta(ABCMeta):
    """
    Metaclass for polymorphic contracts.

    Example:
        class NameGenerator(metaclass=ContractMeta):
            @abstractmethod
            def generate_name(self, gender: NameGender) -> str: ...

        @dataclass
        class StandardNameGenerator(NameGenerator, default=True):
            ...

    StandardNameGenerator auto-registers as the default variant of
    NameGenerator when the class is defined.
    """

    def __new__(mcs, name, bases, attrs, contract: bool = False, default: bool = False, **kwargs):
        new_class = super().__new__(mcs, name, bases, attrs, **kwargs)

        is_root = not any(isinstance(base, ContractMeta) for base in bases)
        if is_root or contract:
            setattr(new_class, CONTRACT_MARKER, True)
            if default:
                logger.warning(f"Contract {name} declared default=True; ignored for contracts")
            logger.debug(f"Declared contract {name}")
            return new_class

        entry = VariantEntry(
            variant_type=new_class,
            name=name,
            factory=new_class,
            is_default=default,
        )
        for ancestor in new_class.__mro__[1:]:
            if ancestor.__dict__.get(CONTRACT_MARKER):
                add_candidate(ancestor, entry)

        return new_class

    def __init__(cls, name, bases, attrs, contract: bool = False, default: bool = False, **kwargs):
        super().__init__(name, bases, attrs, **kwargs)


def is_contract(cls: type) -> bool:
    """Check whether cls was declared as a contract."""
    return bool(cls.__dict__.get(CONTRACT_MARKER))
