"""Tests for PolymorphicSelectionController."""

from abc import abstractmethod
from dataclasses import dataclass
from types import SimpleNamespace

import pytest

from pyqt_polyfield.exceptions import ConfigurationError, InstantiationError
from pyqt_polyfield.forms.contract_meta import ContractMeta
from pyqt_polyfield.forms.object_field_binding import ObjectFieldBinding
from pyqt_polyfield.forms.variant_registry import register_variant
from pyqt_polyfield.protocols.field_view import FieldView
from pyqt_polyfield.protocols.form_config import PolyFieldConfig
from pyqt_polyfield.protocols.menu_widget import MenuItem, MenuSeparator, SelectionCommand
from pyqt_polyfield.protocols.render_strategy import NullRenderStrategy, VariantRenderStrategy
from pyqt_polyfield.services.selection_controller import PolymorphicSelectionController


class RecordingView(FieldView):
    """FieldView that records every primitive it is asked to show."""

    def __init__(self):
        self.calls = []

    def show_label(self, label):
        self.calls.append(("label", label))

    def show_foldout(self, label, expanded):
        self.calls.append(("foldout", label, expanded))

    def show_dropdown(self, text):
        self.calls.append(("dropdown", text))

    def hide_selector(self):
        self.calls.append(("hide_selector",))

    def show_content(self, strategy, instance, indent_level):
        self.calls.append(("content", strategy, instance, indent_level))

    def hide_content(self):
        self.calls.append(("hide_content",))

    def show_menu(self, entries):
        self.calls.append(("menu", list(entries)))

    def show_notice(self, message):
        self.calls.append(("notice", message))


class FixedHeightStrategy(VariantRenderStrategy):
    def __init__(self, height):
        self._height = height

    def height(self, instance):
        return self._height

    def draw(self, position, instance):
        pass


class Character:
    def __init__(self):
        self.generator = None


@pytest.fixture
def generators():
    """NameGenerator contract with one variant that has sub-fields and one without."""

    class NameGenerator(metaclass=ContractMeta):
        @abstractmethod
        def generate_name(self) -> str: ...

    @dataclass
    class StandardNameGenerator(NameGenerator, default=True):
        first_names: str = "Ada"

        def generate_name(self):
            return self.first_names

    @dataclass
    class EmptyNameGenerator(NameGenerator):
        def generate_name(self):
            return ""

    strategy = FixedHeightStrategy(40)
    return SimpleNamespace(
        contract=NameGenerator,
        standard=StandardNameGenerator,
        empty=EmptyNameGenerator,
        strategy=strategy,
        strategies={StandardNameGenerator: strategy},
    )


def _binding(contract, owner=None):
    owner = owner if owner is not None else Character()
    return ObjectFieldBinding(owner, "generator", contract_type=contract)


def _select(controller, binding, variant_type, notify=None):
    entry = next(e for e in controller.registry.variants() if e.variant_type is variant_type)
    return controller.apply_selection(binding, SelectionCommand(binding.field_id, entry.identifier), notify)


# ----------------------------------------------------------------------
# Validation and layout
# ----------------------------------------------------------------------

def test_validate_assigns_default_to_required_field(generators):
    controller = PolymorphicSelectionController(generators.contract)
    binding = _binding(generators.contract)

    assert controller.validate(binding) is True
    assert isinstance(binding.get_value(), generators.standard)
    assert controller.validate(binding) is False


def test_validate_leaves_optional_field_unbound(generators):
    controller = PolymorphicSelectionController(generators.contract, none_allowed=True)
    binding = _binding(generators.contract)

    assert controller.validate(binding) is False
    assert binding.get_value() is None


def test_validate_with_failing_default_leaves_field_unbound(caplog):
    class Weapon:
        pass

    def explode():
        raise RuntimeError("forge is cold")

    register_variant(Weapon, type("Sword", (Weapon,), {}), factory=explode)
    controller = PolymorphicSelectionController(Weapon)
    binding = _binding(Weapon)

    with caplog.at_level("WARNING"):
        assert controller.validate(binding) is False

    assert binding.get_value() is None
    assert "forge is cold" in caplog.text


def test_measure_height_collapsed_and_expanded(generators):
    controller = PolymorphicSelectionController(generators.contract, strategies=generators.strategies)
    binding = _binding(generators.contract)

    assert controller.measure_height(binding) == 22

    binding.set_expanded(True)
    assert controller.measure_height(binding) == 22 + 2 + 40


def test_measure_height_ignores_expand_without_content(generators):
    controller = PolymorphicSelectionController(generators.contract, strategies=generators.strategies)
    binding = _binding(generators.contract)
    _select(controller, binding, generators.empty)
    binding.set_expanded(True)

    assert controller.measure_height(binding) == 22


def test_measure_height_uses_configured_layout(generators):
    from pyqt_polyfield.forms.layout_constants import SPACIOUS_LAYOUT

    controller = PolymorphicSelectionController(
        generators.contract,
        strategies=generators.strategies,
        config=PolyFieldConfig(layout=SPACIOUS_LAYOUT),
    )
    binding = _binding(generators.contract)
    binding.set_expanded(True)

    assert controller.measure_height(binding) == 26 + 4 + 40


def test_render_expanded_field(generators):
    controller = PolymorphicSelectionController(generators.contract, strategies=generators.strategies)
    binding = _binding(generators.contract)
    controller.validate(binding)
    binding.set_expanded(True)
    view = RecordingView()

    controller.render(view, binding, "Name Generator")

    instance = binding.get_value()
    assert view.calls == [
        ("foldout", "Name Generator", True),
        ("dropdown", "Standard"),
        ("content", generators.strategy, instance, 1),
    ]


def test_render_variant_without_content_shows_plain_label(generators):
    controller = PolymorphicSelectionController(generators.contract, strategies=generators.strategies)
    binding = _binding(generators.contract)
    _select(controller, binding, generators.empty)
    view = RecordingView()

    controller.render(view, binding, "Name Generator")

    assert view.calls == [
        ("label", "Name Generator"),
        ("dropdown", "Empty"),
        ("hide_content",),
    ]


def test_render_unbound_optional_field(generators):
    controller = PolymorphicSelectionController(generators.contract, none_allowed=True)
    binding = _binding(generators.contract)
    view = RecordingView()

    controller.render(view, binding, "Name Generator")

    assert ("dropdown", "None") in view.calls
    assert ("label", "Name Generator") in view.calls


def test_non_polymorphic_field_uses_plain_content(generators):
    controller = PolymorphicSelectionController(generators.contract)
    owner = SimpleNamespace(generator=5)
    binding = ObjectFieldBinding(owner, "generator", contract_type=int)
    view = RecordingView()

    assert controller.measure_height(binding) == 0
    controller.render(view, binding, "Count")

    assert view.calls[0] == ("hide_selector",)
    assert view.calls[1][2:] == (5, 0)
    assert isinstance(view.calls[1][1], NullRenderStrategy)


# ----------------------------------------------------------------------
# Expand flag
# ----------------------------------------------------------------------

def test_toggle_expanded_rules(generators):
    controller = PolymorphicSelectionController(
        generators.contract, none_allowed=True, strategies=generators.strategies
    )
    binding = _binding(generators.contract)

    assert controller.toggle_expanded(binding, True) is False

    _select(controller, binding, generators.empty)
    assert controller.toggle_expanded(binding, True) is False
    assert binding.is_expanded() is False

    _select(controller, binding, generators.standard)
    assert controller.toggle_expanded(binding, True) is True
    assert binding.is_expanded() is True


def test_selecting_variant_keeps_expand_flag(generators):
    controller = PolymorphicSelectionController(generators.contract, strategies=generators.strategies)
    binding = _binding(generators.contract)
    controller.validate(binding)
    binding.set_expanded(True)

    _select(controller, binding, generators.standard)

    assert binding.is_expanded() is True


def test_selecting_none_collapses(generators):
    controller = PolymorphicSelectionController(
        generators.contract, none_allowed=True, strategies=generators.strategies
    )
    binding = _binding(generators.contract)
    _select(controller, binding, generators.standard)
    binding.set_expanded(True)

    applied = controller.apply_selection(binding, SelectionCommand(binding.field_id, None))

    assert applied is True
    assert binding.get_value() is None
    assert binding.is_expanded() is False


# ----------------------------------------------------------------------
# Menu
# ----------------------------------------------------------------------

def test_required_field_menu_has_no_none_entry(generators):
    controller = PolymorphicSelectionController(generators.contract)
    binding = _binding(generators.contract)
    controller.validate(binding)

    entries = controller.build_menu(binding)

    assert all(isinstance(entry, MenuItem) for entry in entries)
    assert [entry.label_path for entry in entries] == ["Standard", "Empty"]
    assert [entry.checked for entry in entries] == [True, False]


def test_optional_field_menu_starts_with_none_and_separator(generators):
    controller = PolymorphicSelectionController(generators.contract, none_allowed=True)
    binding = _binding(generators.contract)

    entries = controller.build_menu(binding)

    assert entries[0].label_path == "None"
    assert entries[0].checked is True
    assert entries[0].command == SelectionCommand(binding.field_id, None)
    assert isinstance(entries[1], MenuSeparator)
    assert [entry.label_path for entry in entries[2:]] == ["Standard", "Empty"]


def test_menu_commands_address_the_field(generators):
    controller = PolymorphicSelectionController(generators.contract)
    binding = _binding(generators.contract)

    for entry in controller.build_menu(binding):
        assert entry.command.field_id == binding.field_id
        assert controller.registry.find(entry.command.variant_id) is not None


def test_strip_common_affixes_disabled(generators):
    controller = PolymorphicSelectionController(generators.contract, strip_common_affixes=False)
    binding = _binding(generators.contract)

    labels = [entry.label_path for entry in controller.build_menu(binding)]

    assert labels == ["Standard Name Generator", "Empty Name Generator"]


def test_post_process_name_override(generators):
    class ShoutingController(PolymorphicSelectionController):
        def post_process_name(self, name):
            return name.upper()

    controller = ShoutingController(generators.contract)
    binding = _binding(generators.contract)

    assert controller.build_menu(binding)[0].label_path == "STANDARDNAMEGENERATOR"


PHONETIC = [
    "Alpha", "Bravo", "Charlie", "Delta", "Echo", "Foxtrot",
    "Golf", "Hotel", "India", "Juliet", "Kilo", "Lima",
]


def _register_letters(count):
    class Letter:
        pass

    for name in PHONETIC[:count]:
        register_variant(Letter, type(name, (Letter,), {}))
    return Letter


def test_menu_is_flat_up_to_limit():
    letter = _register_letters(10)
    controller = PolymorphicSelectionController(letter)
    binding = _binding(letter)

    labels = [entry.label_path for entry in controller.build_menu(binding)]

    assert labels == PHONETIC[:10]


def test_menu_is_categorized_past_limit():
    letter = _register_letters(12)
    controller = PolymorphicSelectionController(letter)
    binding = _binding(letter)

    entries = controller.build_menu(binding)

    assert len(entries) == 12
    assert [entry.label_path for entry in entries] == [f"{name[0]}/{name}" for name in PHONETIC]
    assert len({entry.command.variant_id for entry in entries}) == 12


def test_menu_limit_and_separator_are_configurable():
    letter = _register_letters(3)
    config = PolyFieldConfig(flat_menu_limit=2, category_separator=">")
    controller = PolymorphicSelectionController(letter, config=config)
    binding = _binding(letter)

    labels = [entry.label_path for entry in controller.build_menu(binding)]

    assert labels == ["A>Alpha", "B>Bravo", "C>Charlie"]


def test_activate_dropdown_shows_menu(generators):
    controller = PolymorphicSelectionController(generators.contract)
    binding = _binding(generators.contract)
    view = RecordingView()

    controller.activate_dropdown(view, binding)

    kind, entries = view.calls[0]
    assert kind == "menu"
    assert entries == controller.build_menu(binding)


# ----------------------------------------------------------------------
# Configuration errors
# ----------------------------------------------------------------------

def test_required_field_without_variants_falls_back_to_none(caplog):
    class Orphan(metaclass=ContractMeta):
        pass

    controller = PolymorphicSelectionController(Orphan)
    binding = _binding(Orphan)

    assert isinstance(controller.configuration_issue(), ConfigurationError)

    with caplog.at_level("WARNING"):
        first = controller.build_menu(binding)
        second = controller.build_menu(binding)

    assert first == second
    assert len(first) == 1
    assert first[0].command.clears
    assert caplog.text.count("disallows None") == 1
    assert controller.measure_height(binding) == 22
    assert binding.get_value() is None


# ----------------------------------------------------------------------
# Selection dispatch
# ----------------------------------------------------------------------

def test_round_trip_selection_creates_fresh_instances(generators):
    controller = PolymorphicSelectionController(generators.contract)
    binding = _binding(generators.contract)

    assert _select(controller, binding, generators.standard)
    first = binding.get_value()
    first_menu = controller.build_menu(binding)
    first_name = controller.display_name(first)
    binding.set_expanded(True)
    assert _select(controller, binding, generators.empty)
    assert isinstance(binding.get_value(), generators.empty)
    assert _select(controller, binding, generators.standard)

    assert isinstance(binding.get_value(), generators.standard)
    assert binding.get_value() is not first
    assert controller.display_name(binding.get_value()) == first_name == "Standard"
    assert controller.build_menu(binding) == first_menu


def test_failed_instantiation_leaves_field_untouched(generators):
    class Weapon:
        pass

    class Sword(Weapon):
        pass

    class Cursed(Weapon):
        def __init__(self):
            raise ValueError("cursed blade")

    register_variant(Weapon, Sword)
    register_variant(Weapon, Cursed)
    controller = PolymorphicSelectionController(Weapon, strategies={Sword: FixedHeightStrategy(10)})
    binding = _binding(Weapon)
    controller.validate(binding)
    binding.set_expanded(True)
    before = binding.get_value()
    committed = []
    binding.add_listener(committed.append)
    notices = []

    applied = _select(controller, binding, Cursed, notify=notices.append)

    assert applied is False
    assert binding.get_value() is before
    assert binding.is_expanded() is True
    assert binding.in_update is False
    assert committed == []
    assert len(notices) == 1
    assert "Could not create 'Cursed'" in notices[0]


def test_factory_returning_wrong_type_is_rejected():
    class Weapon:
        pass

    class Sword(Weapon):
        pass

    register_variant(Weapon, Sword, factory=lambda: "not a sword")
    controller = PolymorphicSelectionController(Weapon, none_allowed=True)
    binding = _binding(Weapon)

    with pytest.raises(InstantiationError, match="not a Weapon"):
        controller.transactional_set(binding, controller.registry.default())
    assert binding.get_value() is None


def test_selection_for_other_field_raises(generators):
    controller = PolymorphicSelectionController(generators.contract)
    binding = _binding(generators.contract)

    with pytest.raises(ValueError):
        controller.apply_selection(binding, SelectionCommand("elsewhere", None))


def test_unknown_variant_is_ignored(generators, caplog):
    controller = PolymorphicSelectionController(generators.contract, none_allowed=True)
    binding = _binding(generators.contract)

    with caplog.at_level("WARNING"):
        applied = controller.apply_selection(binding, SelectionCommand(binding.field_id, "gone.Variant"))

    assert applied is False
    assert binding.get_value() is None
    assert "Unknown variant" in caplog.text


def test_none_rejected_for_required_field(generators):
    controller = PolymorphicSelectionController(generators.contract)
    binding = _binding(generators.contract)
    controller.validate(binding)

    assert controller.apply_selection(binding, SelectionCommand(binding.field_id, None)) is False
    assert binding.get_value() is not None


def test_selection_commits_once(generators):
    controller = PolymorphicSelectionController(generators.contract, none_allowed=True)
    binding = _binding(generators.contract)
    committed = []
    binding.add_listener(committed.append)

    _select(controller, binding, generators.empty)

    assert len(committed) == 1
    assert isinstance(committed[0], generators.empty)


def test_strategy_lookup_order(generators):
    fallback = FixedHeightStrategy(7)
    controller = PolymorphicSelectionController(
        generators.contract, strategies=generators.strategies, fallback_strategy=fallback
    )

    assert controller.strategy_for(generators.standard()) is generators.strategy
    assert controller.strategy_for(generators.empty()) is fallback
    assert isinstance(controller.strategy_for(None), NullRenderStrategy)


def test_global_render_strategy_is_used(generators):
    from pyqt_polyfield.protocols.render_strategy import register_render_strategy

    strategy = FixedHeightStrategy(12)
    register_render_strategy(generators.empty, strategy)
    controller = PolymorphicSelectionController(generators.contract)

    assert controller.strategy_for(generators.empty()) is strategy


def test_clearing_collapses_despite_failing_listener(generators):
    controller = PolymorphicSelectionController(
        generators.contract, none_allowed=True, strategies=generators.strategies
    )
    binding = _binding(generators.contract)
    _select(controller, binding, generators.standard)
    binding.set_expanded(True)

    def failing_listener(value):
        raise RuntimeError("host refused to redraw")

    binding.add_listener(failing_listener)

    assert controller.apply_selection(binding, SelectionCommand(binding.field_id, None)) is True
    assert binding.get_value() is None
    assert binding.is_expanded() is False


def test_labels_without_common_affixes_keep_word_boundaries():
    class Generator:
        pass

    register_variant(Generator, type("fancy_gen", (Generator,), {}))
    register_variant(Generator, type("PlainGen", (Generator,), {}))
    controller = PolymorphicSelectionController(Generator)
    binding = _binding(Generator)

    labels = [entry.label_path for entry in controller.build_menu(binding)]

    assert labels == ["Fancy Gen", "Plain Gen"]
