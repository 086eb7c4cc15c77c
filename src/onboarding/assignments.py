"""
Step Assignment Store.

Single source of truth for which component appears on which step. Edited by
the admin flow, read by onboarding sessions. Changes stay in memory until
save() pushes them through the assignment sink.
"""

import logging
from collections import Counter

from .components import (
    CONFIGURABLE_PAGES,
    DEFAULT_PRESET,
    ComponentDefinition,
    ComponentType,
    get_preset,
    parse_component_type,
    sort_components,
    validate_page,
)
from .errors import DuplicateComponentError, PersistenceError, UnknownComponentError
from .persistence import AssignmentSink, InMemoryAssignmentSink, SaveResult

logger = logging.getLogger(__name__)


class StepAssignmentStore:
    """
    Component definitions and their page assignment.

    Every write validates the whole new set before swapping it in, so a
    failed write leaves the store unchanged. Assumes a single admin editor;
    concurrent edits are last-write-wins.
    """

    def __init__(
        self,
        components: list[ComponentDefinition] | None = None,
        sink: AssignmentSink | None = None,
    ):
        self.sink = sink or InMemoryAssignmentSink()
        initial = components if components is not None else get_preset(DEFAULT_PRESET)
        self._components: list[ComponentDefinition] = []
        self._replace(initial)
        self.has_changes = False

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def components(self) -> list[ComponentDefinition]:
        """All definitions, inactive included, in insertion order."""
        return list(self._components)

    def list_components_for_step(self, step: int) -> list[ComponentDefinition]:
        """Active components on a step, in type precedence order."""
        return sort_components(
            c for c in self._components if c.page_number == step and c.is_active
        )

    def page_overview(self) -> dict[int, list[ComponentDefinition]]:
        return {page: self.list_components_for_step(page) for page in CONFIGURABLE_PAGES}

    def get(self, component_type: ComponentType | str) -> ComponentDefinition:
        component_type = parse_component_type(component_type)
        for component in self._components:
            if component.component_type == component_type:
                return component
        raise UnknownComponentError(component_type.value)

    def to_list(self) -> list[dict]:
        return [c.to_dict() for c in self._components]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def reassign_component(self, component_type: ComponentType | str, new_page: int) -> ComponentDefinition:
        """Move one component to page 2 or 3."""
        validate_page(new_page)
        target = self.get(component_type)
        updated = target.moved_to(new_page)
        self._replace([updated if c is target else c for c in self._components])
        self.has_changes = True
        logger.info(f"Moved {target.component_type.value} to page {new_page}")
        return updated

    def set_component_active(self, component_type: ComponentType | str, is_active: bool) -> ComponentDefinition:
        """Show or hide a component without removing it."""
        target = self.get(component_type)
        updated = target.with_active(is_active)
        self._replace([updated if c is target else c for c in self._components])
        self.has_changes = True
        logger.info(f"Set {target.component_type.value} active={is_active}")
        return updated

    def apply_preset(self, preset_name: str) -> list[ComponentDefinition]:
        """Replace the whole assignment with a named preset."""
        components = get_preset(preset_name)
        self._replace(components)
        self.has_changes = True
        logger.info(f"Applied preset {preset_name}")
        return self.components

    def replace_all(self, components: list[ComponentDefinition]) -> None:
        self._replace(components)
        self.has_changes = True

    def _replace(self, components: list[ComponentDefinition]) -> None:
        active = Counter(c.component_type for c in components if c.is_active)
        for component_type, count in active.items():
            if count > 1:
                raise DuplicateComponentError(component_type.value)
        self._components = list(components)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    async def save(self) -> SaveResult:
        """
        Persist the current assignment.

        Raises PersistenceError on failure; has_changes stays set so the
        admin can retry.
        """
        result = await self.sink.save_assignments(self.components)
        if not result.success:
            logger.error(f"Failed to save component assignment: {result.error}")
            raise PersistenceError(result.error or "Failed to save configuration")
        self.has_changes = False
        logger.info("Component assignment saved")
        return result

    async def load(self, fallback_preset: str = DEFAULT_PRESET) -> None:
        """Replace the in-memory assignment with the stored one, or a preset if none."""
        stored = await self.sink.load_assignments()
        self._replace(stored or get_preset(fallback_preset))
        self.has_changes = False
