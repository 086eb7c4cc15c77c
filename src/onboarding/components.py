"""
Onboarding Components.

The closed set of profile components an administrator can place on the
configurable steps, and the fixed presets that map them to pages.
"""

from dataclasses import dataclass, asdict, replace
from enum import Enum

from .errors import InvalidPageError, UnknownComponentError, UnknownPresetError


class ComponentType(str, Enum):
    """Profile input chunks. Declaration order is the display order within a step."""
    ABOUT_ME = "about_me"
    ADDRESS = "address"
    BIRTHDATE = "birthdate"


# Steps 1 (registration) and 4 (completion) are fixed
CONFIGURABLE_PAGES = (2, 3)

COMPONENT_ORDER = {t: i for i, t in enumerate(ComponentType)}

COMPONENT_LABELS = {
    ComponentType.ABOUT_ME: "About Me",
    ComponentType.ADDRESS: "Address",
    ComponentType.BIRTHDATE: "Birthdate",
}

COMPONENT_DESCRIPTIONS = {
    ComponentType.ABOUT_ME: "Textarea for personal information",
    ComponentType.ADDRESS: "Street, city, state, and ZIP inputs",
    ComponentType.BIRTHDATE: "Date picker for birth date",
}

# Draft field names each component fills in
COMPONENT_FIELDS = {
    ComponentType.ABOUT_ME: ("about_me",),
    ComponentType.ADDRESS: ("street_address", "city", "state", "zip"),
    ComponentType.BIRTHDATE: ("birthdate",),
}


@dataclass(frozen=True)
class ComponentDefinition:
    """One component placed on one page."""
    id: str
    component_type: ComponentType
    page_number: int
    is_active: bool = True

    def __post_init__(self):
        # frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, "component_type", parse_component_type(self.component_type))
        validate_page(self.page_number)

    def moved_to(self, page_number: int) -> "ComponentDefinition":
        return replace(self, page_number=page_number)

    def with_active(self, is_active: bool) -> "ComponentDefinition":
        return replace(self, is_active=is_active)

    @property
    def label(self) -> str:
        return COMPONENT_LABELS[self.component_type]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["component_type"] = self.component_type.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ComponentDefinition":
        return cls(
            id=str(data["id"]),
            component_type=data["component_type"],
            page_number=int(data["page_number"]),
            is_active=bool(data.get("is_active", True)),
        )


def parse_component_type(value: "ComponentType | str") -> ComponentType:
    """Resolve a string to a ComponentType, or raise UnknownComponentError."""
    if isinstance(value, ComponentType):
        return value
    try:
        return ComponentType(value)
    except ValueError:
        raise UnknownComponentError(str(value))


def validate_page(page_number: int) -> int:
    if page_number not in CONFIGURABLE_PAGES:
        raise InvalidPageError(page_number)
    return page_number


def sort_components(components) -> list[ComponentDefinition]:
    """Order components by type precedence (about_me, address, birthdate)."""
    return sorted(components, key=lambda c: COMPONENT_ORDER[c.component_type])


# =============================================================================
# Presets
# =============================================================================

def _preset(about_me: int, address: int, birthdate: int) -> tuple[ComponentDefinition, ...]:
    return (
        ComponentDefinition("1", ComponentType.ABOUT_ME, about_me),
        ComponentDefinition("2", ComponentType.ADDRESS, address),
        ComponentDefinition("3", ComponentType.BIRTHDATE, birthdate),
    )


PRESETS: dict[str, tuple[ComponentDefinition, ...]] = {
    "default": _preset(2, 3, 3),
    "personal_address_first": _preset(2, 2, 3),
    "all_page_2": _preset(2, 2, 2),
}

DEFAULT_PRESET = "default"

PRESET_INFO = {
    "default": {
        "title": "Default Setup",
        "description": "About Me → Page 2; Address + Birthdate → Page 3",
    },
    "personal_address_first": {
        "title": "Personal + Address First",
        "description": "About Me + Address → Page 2; Birthdate → Page 3",
    },
    "all_page_2": {
        "title": "All on Page 2",
        "description": "All Components → Page 2; Nothing → Page 3",
    },
}


def get_preset(preset_name: str) -> list[ComponentDefinition]:
    """Return a fresh copy of a preset's definitions."""
    if preset_name not in PRESETS:
        raise UnknownPresetError(preset_name)
    return list(PRESETS[preset_name])


def get_preset_options() -> list[dict]:
    """Preset metadata for admin rendering."""
    return [
        {
            "name": name,
            **PRESET_INFO[name],
            "pages": {c.component_type.value: c.page_number for c in PRESETS[name]},
        }
        for name in PRESETS
    ]
