"""
Selection controller for polymorphic fields.

Binds a FieldBinding to its contract's VariantRegistry and drives layout
and mutation of the field:

- validate(): auto-assigns the default variant to required fields
- measure_height() / render(): selector row plus optional sub-content
- build_menu() / apply_selection(): menu entries and their command dispatch
- transactional_set(): instance creation first, then begin/assign/commit

One controller serves every field of its contract. Per-variant drawing is
injected as VariantRenderStrategy objects instead of subclassing the
controller for each contract.

State per field is {Unbound, Bound} x {Collapsed, Expanded}:
- selecting a variant binds the field and keeps the expand flag
- selecting None unbinds it and collapses it
- the foldout is only reachable while bound with content height > 0
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
import logging

from pyqt_polyfield.exceptions import ConfigurationError, InstantiationError
from pyqt_polyfield.forms.variant_registry import VariantEntry, VariantRegistry, get_variant_registry
from pyqt_polyfield.protocols.field_binding import FieldBinding
from pyqt_polyfield.protocols.field_view import FieldView
from pyqt_polyfield.protocols.form_config import PolyFieldConfig, get_polyfield_config
from pyqt_polyfield.protocols.menu_widget import MenuEntry, MenuItem, MenuSeparator, SelectionCommand
from pyqt_polyfield.protocols.render_strategy import (
    NullRenderStrategy, VariantRenderStrategy, get_render_strategy
)
from .menu_builder import MenuBuildContext, MenuBuilderService
from .name_processing import common_affixes, nicify_name, strip_affixes

logger = logging.getLogger(__name__)

_NULL_STRATEGY = NullRenderStrategy()


class PolymorphicSelectionController:
    """
    Drives one contract's polymorphic fields.

    Example:
        controller = PolymorphicSelectionController(
            NameGenerator,
            strategies={StandardNameGenerator: StandardNameGeneratorStrategy()},
        )
        controller.measure_height(binding)
        controller.render(view, binding, "Name Generator")

    Subclasses may override post_process_name() to customize display names.
    """

    def __init__(
        self,
        contract: type,
        *,
        none_allowed: bool = False,
        strategies: Optional[Mapping[type, VariantRenderStrategy]] = None,
        fallback_strategy: Optional[VariantRenderStrategy] = None,
        config: Optional[PolyFieldConfig] = None,
        strip_common_affixes: bool = True,
    ):
        """
        Args:
            contract: Contract type of the fields this controller drives
            none_allowed: Whether an unbound field is a valid selection
            strategies: Render strategies keyed by variant type (matched along the MRO)
            fallback_strategy: Strategy for variants without a registered one
            config: Configuration override, defaults to the global config
            strip_common_affixes: Strip name words shared by all variants from labels
        """
        self.contract = contract
        self.none_allowed = none_allowed
        self._strategies: Dict[type, VariantRenderStrategy] = dict(strategies or {})
        self._fallback_strategy = fallback_strategy or _NULL_STRATEGY
        self._config = config
        self._strip_common_affixes = strip_common_affixes
        self._menu_builder = MenuBuilderService()
        self._affix_cache: Optional[Tuple[VariantRegistry, List[str], List[str]]] = None
        self._configuration_reported = False

    @property
    def config(self) -> PolyFieldConfig:
        return self._config or get_polyfield_config()

    @property
    def registry(self) -> VariantRegistry:
        return get_variant_registry(self.contract)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configuration_issue(self) -> Optional[ConfigurationError]:
        """Report a field that disallows None while no variant exists."""
        if not self.none_allowed and self.registry.count() == 0:
            return ConfigurationError(self.contract)
        return None

    def none_selectable(self) -> bool:
        """None is selectable when allowed, or when there is nothing else to select."""
        if self.none_allowed:
            return True
        issue = self.configuration_issue()
        if issue is None:
            return False
        if not self._configuration_reported:
            logger.warning(str(issue))
            self._configuration_reported = True
        return True

    def is_polymorphic_field(self, binding: FieldBinding) -> bool:
        """Whether the binding is a polymorphic field of this controller's contract."""
        return binding.supports_polymorphic and binding.contract_type is self.contract

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def strategy_for(self, instance: Any) -> VariantRenderStrategy:
        """Find the render strategy of an instance's runtime type."""
        if instance is None:
            return _NULL_STRATEGY
        for klass in type(instance).__mro__:
            strategy = self._strategies.get(klass)
            if strategy is not None:
                return strategy
        return get_render_strategy(type(instance)) or self._fallback_strategy

    def content_height(self, binding: FieldBinding) -> int:
        """Height of the bound instance's own sub-fields, 0 when unbound or empty."""
        instance = binding.get_value()
        if instance is None:
            return 0
        return self.strategy_for(instance).height(instance)

    def validate(self, binding: FieldBinding) -> bool:
        """
        Bind a required, empty field to a fresh instance of the default variant.

        Returns:
            True if a default was assigned
        """
        if self.none_allowed or binding.get_value() is not None:
            return False

        default = self.registry.default()
        if default is None:
            return False

        logger.debug(f"Assigning default {default.name} to required field '{binding.field_id}'")
        try:
            self.transactional_set(binding, default)
        except InstantiationError as exc:
            logger.warning(f"Default for '{binding.field_id}' could not be created: {exc}")
            return False
        return True

    def measure_height(self, binding: FieldBinding, label: Optional[str] = None) -> int:
        """
        Height of the whole field: one selector line plus, when expanded,
        spacing and the sub-content height.

        Non-polymorphic fields measure as their plain content.
        """
        if not self.is_polymorphic_field(binding):
            return self.content_height(binding)

        self.validate(binding)
        layout = self.config.layout
        height = layout.line_height

        content = self.content_height(binding)
        if content > 0 and binding.is_expanded():
            height += layout.vertical_spacing + content

        return height

    def render(self, view: FieldView, binding: FieldBinding, label: str) -> None:
        """Present the field on a view."""
        instance = binding.get_value()

        if not self.is_polymorphic_field(binding):
            view.hide_selector()
            view.show_content(self.strategy_for(instance), instance, 0)
            return

        expandable = instance is not None and self.content_height(binding) > 0
        if expandable:
            view.show_foldout(label, binding.is_expanded())
        else:
            view.show_label(label)

        view.show_dropdown(self.display_name(instance))

        if expandable and binding.is_expanded():
            view.show_content(self.strategy_for(instance), instance, 1)
        else:
            view.hide_content()

    def toggle_expanded(self, binding: FieldBinding, expanded: bool) -> bool:
        """
        Set the expand flag; ignored unless the field is bound with content.

        Returns:
            True if the flag was applied
        """
        if binding.get_value() is None or self.content_height(binding) <= 0:
            logger.debug(f"Ignoring expand toggle of '{binding.field_id}' - nothing to expand")
            return False
        binding.set_expanded(expanded)
        return True

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def post_process_name(self, name: str) -> str:
        """Hook: strip words shared by all variant names of the contract."""
        if not self._strip_common_affixes:
            return name
        prefix, suffix = self._common_affixes()
        return strip_affixes(name, prefix, suffix)

    def variant_label(self, entry: VariantEntry) -> str:
        return nicify_name(self.post_process_name(entry.name))

    def display_name(self, instance: Any) -> str:
        """Dropdown text for the bound instance, or the None label."""
        if instance is None:
            return self.config.none_label
        for entry in self.registry.variants():
            if entry.variant_type is type(instance):
                return self.variant_label(entry)
        return nicify_name(self.post_process_name(type(instance).__name__))

    def _common_affixes(self) -> Tuple[List[str], List[str]]:
        registry = self.registry
        if self._affix_cache is None or self._affix_cache[0] is not registry:
            prefix, suffix = common_affixes([entry.name for entry in registry.variants()])
            self._affix_cache = (registry, prefix, suffix)
        return self._affix_cache[1], self._affix_cache[2]

    # ------------------------------------------------------------------
    # Menu and selection
    # ------------------------------------------------------------------

    def build_menu(self, binding: FieldBinding) -> List[MenuEntry]:
        """
        Menu entries for the field.

        A None entry comes first when None is selectable, followed by a
        separator and the variants (flat up to the configured limit,
        grouped by first letter beyond it).
        """
        config = self.config
        registry = self.registry
        instance = binding.get_value()
        entries: List[MenuEntry] = []

        if self.none_selectable():
            entries.append(MenuItem(
                label_path=config.none_label,
                checked=instance is None,
                command=SelectionCommand(binding.field_id, None),
            ))

        if registry.count() > 0:
            if entries:
                entries.append(MenuSeparator())
            context = MenuBuildContext(
                field_id=binding.field_id,
                labeled_variants=tuple((entry, self.variant_label(entry)) for entry in registry.variants()),
                current_type=type(instance) if instance is not None else None,
                flat_limit=config.flat_menu_limit,
                category_separator=config.category_separator,
            )
            entries.extend(self._menu_builder.build_variant_items(context))

        return entries

    def activate_dropdown(self, view: FieldView, binding: FieldBinding) -> None:
        """Build the menu for the field and pop it up on the view."""
        view.show_menu(self.build_menu(binding))

    def apply_selection(
        self,
        binding: FieldBinding,
        command: SelectionCommand,
        notify: Optional[Callable[[str], None]] = None,
    ) -> bool:
        """
        Single entry point for menu selections.

        Instantiation failures leave the field untouched; they are logged and
        passed to notify as a transient message.

        Returns:
            True if the field now holds the selection

        Raises:
            ValueError: If the command addresses another field
        """
        if command.field_id != binding.field_id:
            raise ValueError(
                f"Selection for field '{command.field_id}' dispatched to field '{binding.field_id}'"
            )

        if command.clears:
            if not self.none_selectable():
                logger.warning(f"None is not a valid selection for '{binding.field_id}'")
                return False
            self.transactional_set(binding, None)
            return True

        entry = self.registry.find(command.variant_id)
        if entry is None:
            logger.warning(f"Unknown variant '{command.variant_id}' for {self.contract.__name__}")
            return False

        try:
            self.transactional_set(binding, entry)
        except InstantiationError as exc:
            logger.warning(f"Selection for '{binding.field_id}' not applied: {exc}")
            if notify is not None:
                notify(str(exc))
            return False
        return True

    def transactional_set(self, binding: FieldBinding, variant: Optional[VariantEntry]) -> None:
        """
        Replace the bound value with a fresh instance of variant, or clear it.

        The instance is created before the update scope opens, so a failing
        factory never reaches the binding.

        Raises:
            InstantiationError: If the variant cannot be instantiated
        """
        value = None if variant is None else self._instantiate(variant)

        with binding.transaction():
            binding.assign(value)

        if value is None:
            binding.set_expanded(False)

        logger.debug(
            f"Set '{binding.field_id}' to {variant.name if variant is not None else None}"
        )

    def _instantiate(self, variant: VariantEntry) -> Any:
        try:
            value = variant.create()
        except Exception as exc:
            raise InstantiationError(variant, exc) from exc

        if not _is_instance_of(value, self.contract):
            raise InstantiationError(
                variant,
                reason=f"factory returned {type(value).__name__}, not a {self.contract.__name__}",
            )
        return value


def _is_instance_of(value: Any, contract: type) -> bool:
    try:
        return isinstance(value, contract)
    except TypeError:
        # Non runtime-checkable Protocol contracts only support nominal checks
        return contract in type(value).__mro__
