"""Property classification for presentation layers.

Renderers show a few "main" properties of each activity prominently and
fold the rest into grouped sub-panels, the way the workflow designer's
property grid does. This module holds that vocabulary as data and the pure
functions that apply it to property maps and diff changes.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from xamlviz.config import get_config
from xamlviz.differ import PropertyChange

DEFAULT_MAIN_PROPERTIES = ("To", "Value", "Condition", "Selector", "Message")

# Internal or container properties never listed in a sub-panel
INTERNAL_PROPERTIES = frozenset(
    {
        "DisplayName",
        "AssignOperations",
        "ScopeGuid",
        "ScopeIdentifier",
        "Version",
        "Body",
        "VerifyOptions",
    }
)


@dataclass(frozen=True, slots=True)
class PropertyGroup:
    """Named group of properties in a sub-panel (Target, Input, Options)."""

    label: str
    properties: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ActivityPropertyConfig:
    """Main properties and sub-panel groups of one activity type."""

    main_properties: tuple[str, ...]
    sub_groups: tuple[PropertyGroup, ...] = ()


ACTIVITY_CONFIGS: dict[str, ActivityPropertyConfig] = {
    "NApplicationCard": ActivityPropertyConfig(
        main_properties=("TargetApp",),
        sub_groups=(
            PropertyGroup("Target", ("Selector", "ObjectRepository")),
            PropertyGroup("Input", ("AttachMode",)),
            PropertyGroup("Options", ("InteractionMode", "HealingAgentBehavior")),
        ),
    ),
    "NClick": ActivityPropertyConfig(
        main_properties=("Target",),
        sub_groups=(
            PropertyGroup(
                "Target", ("FullSelectorArgument", "FuzzySelectorArgument", "ObjectRepository")
            ),
            PropertyGroup("Input", ("ClickType", "CursorMotionType", "MouseButton")),
            PropertyGroup(
                "Options",
                ("ActivateBefore", "AlterDisabledElement", "InteractionMode", "KeyModifiers"),
            ),
        ),
    ),
    "NTypeInto": ActivityPropertyConfig(
        main_properties=("Target", "Text"),
        sub_groups=(
            PropertyGroup("Input", ("ClickType", "MouseButton", "KeyModifiers")),
            PropertyGroup(
                "Options",
                (
                    "ActivateBefore",
                    "InteractionMode",
                    "EmptyField",
                    "DelayBetweenKeys",
                    "DelayBefore",
                    "DelayAfter",
                ),
            ),
        ),
    ),
    "NGetText": ActivityPropertyConfig(
        main_properties=("Target", "Value"),
        sub_groups=(PropertyGroup("Options", ("ActivateBefore", "InteractionMode")),),
    ),
}

_DEFAULT_CONFIG = ActivityPropertyConfig(main_properties=DEFAULT_MAIN_PROPERTIES)

# Activities with a dedicated rendering instead of a sub-panel
_DEDICATED_RENDERING = frozenset({"Assign", "MultipleAssign"})

ChangeT = TypeVar("ChangeT", bound=PropertyChange)


def is_hidden_property(name: str) -> bool:
    """True for designer metadata attributes (``sap:``, ``xmlns``...)."""
    return name.startswith(get_config().hidden_property_prefixes)


def activity_property_config(activity_type: str) -> ActivityPropertyConfig:
    """Property layout for an activity type; unknown types get the default."""
    return ACTIVITY_CONFIGS.get(activity_type, _DEFAULT_CONFIG)


def sub_properties(properties: Mapping[str, Any], activity_type: str) -> dict[str, Any]:
    """Properties that belong in the sub-panel.

    Excludes main properties, hidden designer metadata and internal
    properties.
    """
    main = set(activity_property_config(activity_type).main_properties)
    return {
        name: value
        for name, value in properties.items()
        if name not in main and name not in INTERNAL_PROPERTIES and not is_hidden_property(name)
    }


def has_sub_panel(activity_type: str) -> bool:
    return activity_type not in _DEDICATED_RENDERING


def is_defined_activity(activity_type: str) -> bool:
    """True if a renderer has a layout or dedicated rendering for the type.

    Types starting with ``N`` are the modern UI automation family.
    """
    return (
        activity_type in _DEDICATED_RENDERING
        or activity_type == "LogMessage"
        or activity_type in ACTIVITY_CONFIGS
        or activity_type.startswith("N")
    )


def categorize_changes(
    changes: Sequence[ChangeT], activity_type: str
) -> tuple[list[ChangeT], list[ChangeT]]:
    """Split property changes into (main, sub) for display.

    Only types with an entry in ACTIVITY_CONFIGS are split; every change of
    other types is main. A main property whose before and after values are
    both structured objects goes to sub, since expanding it is noisy.
    """
    config = ACTIVITY_CONFIGS.get(activity_type)
    if config is None:
        return list(changes), []

    main: list[ChangeT] = []
    sub: list[ChangeT] = []
    for change in changes:
        if change.property_name not in config.main_properties:
            sub.append(change)
        elif isinstance(change.before, dict) and isinstance(change.after, dict):
            sub.append(change)
        else:
            main.append(change)
    return main, sub


__all__ = [
    "ACTIVITY_CONFIGS",
    "ActivityPropertyConfig",
    "PropertyGroup",
    "activity_property_config",
    "categorize_changes",
    "has_sub_panel",
    "is_defined_activity",
    "is_hidden_property",
    "sub_properties",
]
