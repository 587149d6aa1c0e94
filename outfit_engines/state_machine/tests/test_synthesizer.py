"""Tests for outfit layer synthesis and merging."""
from outfit_engines.state_machine.models import (
    NEUTRAL_SELECTOR_VALUE,
    NEUTRAL_STATE_NAME,
    AnimatorController,
    ConditionMode,
    ControllerParameter,
    LayerState,
    ParameterType,
    StateMachineLayer,
)
from outfit_engines.state_machine.synthesizer import (
    LAYOUT_CENTER,
    build_outfit_layer,
    merge_outfit_layer,
    remove_layer,
    state_positions,
    synthesize,
    vote_write_defaults,
)
from outfit_engines.slot_store.models import ObjectState, Slot
from outfit_engines.slot_store.service import new_store


def _store():
    store = new_store("avatar-1")
    store.slots[0] = Slot(
        name="Casual",
        configured=True,
        tracked=["Outfits/Shirt", "Outfits/Jacket"],
        states=[
            ObjectState(path="Outfits/Shirt", active=True),
            ObjectState(path="Outfits/Jacket", active=False),
        ],
    )
    store.slots[1] = Slot(name="Formal")
    store.slots[3] = Slot(
        name="Jacket Day",
        configured=True,
        tracked=["Outfits/Jacket"],
        states=[ObjectState(path="Outfits/Jacket", active=True)],
    )
    return store


def _host_layer(name, *flags):
    return StateMachineLayer(
        name=name,
        states=[LayerState(name=f"{name}_{i}", write_defaults=flag) for i, flag in enumerate(flags)],
    )


def _threshold(transition):
    return transition.conditions[0].threshold


class TestBuildLayer:
    def test_neutral_is_default_and_empty(self):
        layer = build_outfit_layer(_store())
        assert layer.name == "OutfitManager"
        assert layer.parameter == "OutfitIndex"
        assert layer.default_state == NEUTRAL_STATE_NAME
        neutral = layer.state(NEUTRAL_STATE_NAME)
        assert neutral.assignments == {} and neutral.blend_assignments == {}
        assert neutral.position == LAYOUT_CENTER

    def test_one_state_per_configured_slot(self):
        layer = build_outfit_layer(_store())
        assert [s.slot_index for s in layer.states] == [None, 0, 3]
        assert layer.state_for_slot(1) is None
        casual = layer.state_for_slot(0)
        assert casual.name == "Outfit_0_Casual"
        assert casual.assignments == {"Outfits/Shirt": True, "Outfits/Jacket": False}

    def test_global_transitions(self):
        layer = build_outfit_layer(_store())
        global_edges = [t for t in layer.transitions if t.is_global]
        assert [(t.destination, _threshold(t)) for t in global_edges] == [
            ("Outfit_0_Casual", 0),
            ("Outfit_3_Jacket Day", 3),
            (NEUTRAL_STATE_NAME, -1),
        ]
        for t in layer.transitions:
            assert t.duration == 0.0
            assert not t.has_exit_time
            assert not t.can_transition_to_self
            assert t.conditions[0].mode == ConditionMode.EQUALS
            assert t.conditions[0].parameter == "OutfitIndex"

    def test_direct_transitions_between_configured_states(self):
        layer = build_outfit_layer(_store())
        direct = [(t.source, t.destination, _threshold(t)) for t in layer.transitions if not t.is_global]
        assert direct == [
            ("Outfit_0_Casual", "Outfit_3_Jacket Day", 3),
            ("Outfit_3_Jacket Day", "Outfit_0_Casual", 0),
        ]

    def test_no_configured_slots(self):
        layer = build_outfit_layer(new_store("a"))
        assert [s.name for s in layer.states] == [NEUTRAL_STATE_NAME]
        assert [t.destination for t in layer.transitions] == [NEUTRAL_STATE_NAME]

    def test_env_overrides_names(self, monkeypatch):
        monkeypatch.setenv("OUTFIT_LAYER_NAME", "Wardrobe")
        monkeypatch.setenv("OUTFIT_SELECTOR_PARAMETER", "Look")
        layer = build_outfit_layer(_store())
        assert layer.name == "Wardrobe"
        assert layer.transitions[0].conditions[0].parameter == "Look"

    def test_deterministic(self):
        assert build_outfit_layer(_store()).compute_hash() == build_outfit_layer(_store()).compute_hash()


def test_state_positions_on_circle():
    positions = state_positions(4)
    assert positions[0] == (500.0, 100.0)
    assert positions[2] == (100.0, 100.0)
    assert state_positions(0) == []


class TestWriteDefaultsVote:
    def test_majority_on(self):
        controller = AnimatorController(layers=[_host_layer("Base", True, True, False), _host_layer("Gestures", True)])
        assert vote_write_defaults(controller) is True

    def test_tie_and_empty_resolve_off(self):
        assert vote_write_defaults(AnimatorController()) is False
        assert vote_write_defaults(AnimatorController(layers=[_host_layer("Base", True, False)])) is False

    def test_excluded_layer_not_counted(self):
        controller = AnimatorController(layers=[_host_layer("Base", False), _host_layer("OutfitManager", True, True)])
        assert vote_write_defaults(controller, exclude_layer="OutfitManager") is False


class TestMerge:
    def test_new_states_follow_vote(self):
        controller = AnimatorController(layers=[_host_layer("Base", True, True, True, False)])
        merged = synthesize(_store(), controller)
        outfit = merged.layer("OutfitManager")
        assert all(s.write_defaults for s in outfit.states)

    def test_empty_controller_gets_off(self):
        merged = synthesize(_store(), AnimatorController())
        assert not any(s.write_defaults for s in merged.layer("OutfitManager").states)

    def test_adds_int_parameter_once(self):
        merged = synthesize(_store(), AnimatorController())
        again = synthesize(_store(), merged)
        assert [p.name for p in again.parameters] == ["OutfitIndex"]
        assert again.parameters[0].type == ParameterType.INT

    def test_selector_defaults_to_neutral(self):
        merged = synthesize(_store(), AnimatorController())
        assert merged.parameter("OutfitIndex").default == NEUTRAL_SELECTOR_VALUE

    def test_existing_parameter_corrected_in_place(self):
        controller = AnimatorController(
            parameters=[
                ControllerParameter(name="Gesture", type=ParameterType.INT, default=3),
                ControllerParameter(name="OutfitIndex", type=ParameterType.FLOAT, default=2),
            ]
        )
        merged = synthesize(_store(), controller)
        assert [p.name for p in merged.parameters] == ["Gesture", "OutfitIndex"]
        selector = merged.parameter("OutfitIndex")
        assert selector.type == ParameterType.INT
        assert selector.default == NEUTRAL_SELECTOR_VALUE
        assert merged.parameter("Gesture").default == 3
        assert controller.parameter("OutfitIndex").default == 2

    def test_regeneration_is_idempotent(self):
        controller = AnimatorController(layers=[_host_layer("Base", False)])
        first = synthesize(_store(), controller)
        second = synthesize(_store(), first)
        assert [layer.name for layer in second.layers] == ["Base", "OutfitManager"]
        assert first.compute_hash() == second.compute_hash()

    def test_previous_outfit_layer_excluded_from_vote(self):
        stale = _host_layer("OutfitManager", True, True, True)
        controller = AnimatorController(layers=[_host_layer("Base", False), stale])
        merged = merge_outfit_layer(controller, build_outfit_layer(_store()))
        assert not any(s.write_defaults for s in merged.layer("OutfitManager").states)

    def test_input_controller_untouched(self):
        controller = AnimatorController(layers=[_host_layer("OutfitManager", False)])
        before = controller.compute_hash()
        synthesize(_store(), controller)
        assert controller.compute_hash() == before


def test_remove_layer_counts_all_matches():
    controller = AnimatorController(layers=[_host_layer("X"), _host_layer("Y"), _host_layer("X")])
    assert remove_layer(controller, "X") == 2
    assert [layer.name for layer in controller.layers] == ["Y"]


def test_casual_formal_scenario():
    store = new_store("avatar-1")
    store.slots[0] = Slot(
        name="Casual",
        configured=True,
        tracked=["Outfits/Shirt", "Outfits/Jacket"],
        states=[
            ObjectState(path="Outfits/Shirt", active=True),
            ObjectState(path="Outfits/Jacket", active=False),
        ],
    )
    store.slots[1] = Slot(name="Formal", tracked=["Outfits/Shirt", "Outfits/Jacket"])
    layer = build_outfit_layer(store)

    assert layer.state_for_slot(0).assignments == {"Outfits/Shirt": True, "Outfits/Jacket": False}
    assert layer.state_for_slot(1) is None
    assert layer.state(NEUTRAL_STATE_NAME).assignments == {}
    edges = {_threshold(t): t.destination for t in layer.transitions if t.is_global}
    assert edges == {-1: NEUTRAL_STATE_NAME, 0: "Outfit_0_Casual"}
