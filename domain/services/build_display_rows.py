from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from domain.models import (
    END_OF_TIME,
    Activity,
    DisplayRow,
    EntityType,
    Individual,
    Installation,
    InstallationRow,
    ModelSnapshot,
    PlainRow,
    RowKey,
)
from domain.services.resolve_visibility import VisibilityResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagramView:
    """Which slice of the model is on screen."""

    activity_context: str | None = None
    hide_non_participating: bool = False
    individual_order: tuple[str, ...] | None = None


def activities_in_view(snapshot: ModelSnapshot, view: DiagramView) -> list[Activity]:
    if view.activity_context is not None:
        return snapshot.parts_of(view.activity_context)
    return [activity for activity in snapshot.activities if activity.part_of is None]


def ordered_individuals(snapshot: ModelSnapshot, view: DiagramView) -> list[Individual]:
    if view.individual_order is None:
        return list(snapshot.individuals)
    by_id = snapshot.individuals_by_id()
    ordered: list[Individual] = []
    seen: set[str] = set()
    for individual_id in view.individual_order:
        individual = by_id.get(individual_id)
        if individual is None or individual_id in seen:
            continue
        seen.add(individual_id)
        ordered.append(individual)
    ordered.extend(individual for individual in snapshot.individuals if individual.id not in seen)
    return ordered


def build_display_rows(
    snapshot: ModelSnapshot,
    resolver: VisibilityResolver,
    view: DiagramView | None = None,
) -> list[DisplayRow]:
    view = view or DiagramView()
    individuals = ordered_individuals(snapshot, view)
    for individual in individuals:
        warn_overlapping_installations(individual)

    system_components = [
        ind for ind in individuals if ind.entity_type == EntityType.SYSTEM_COMPONENT
    ]
    installed_components = [
        ind for ind in individuals if ind.entity_type == EntityType.INSTALLED_COMPONENT
    ]

    rows: list[DisplayRow] = []
    added: set[RowKey] = set()
    for individual in individuals:
        beginning, ending = participant_extent(snapshot, individual)
        rows.append(
            DisplayRow(
                ref=PlainRow(individual.id),
                individual=individual,
                beginning=beginning,
                ending=ending,
            )
        )
        if individual.entity_type != EntityType.SYSTEM:
            continue
        system = individual
        for sc in system_components:
            for sc_inst in _sorted_installations(sc.installations, target_id=system.id):
                sc_row = _installation_row(
                    resolver, sc, InstallationRow(sc.id, system.id, sc_inst.id), 1
                )
                if sc_row is None or sc_row.key in added:
                    continue
                added.add(sc_row.key)
                rows.append(sc_row)
                for ic in installed_components:
                    for ic_inst in _sorted_installations(ic.installations, target_id=sc.id):
                        if ic_inst.sc_installation_context_id not in (None, sc_inst.id):
                            continue
                        if ic_inst.system_context_id not in (None, system.id):
                            continue
                        ic_row = _installation_row(
                            resolver,
                            ic,
                            InstallationRow(ic.id, sc.id, ic_inst.id, sc_inst.id),
                            2,
                        )
                        if ic_row is None or ic_row.key in added:
                            continue
                        added.add(ic_row.key)
                        rows.append(ic_row)

    if view.hide_non_participating:
        rows = filter_participating_rows(rows, snapshot, activities_in_view(snapshot, view))
    return rows


def participant_extent(snapshot: ModelSnapshot, individual: Individual) -> tuple[float, float]:
    """Row extent of an entity, following its participations where it is flagged to.

    Entities without any participation keep their declared extent.
    """
    if not snapshot.has_participants(individual.id):
        return individual.beginning, individual.ending
    beginning = individual.beginning
    ending = individual.ending
    if individual.begins_with_participant:
        beginning = snapshot.earliest_participant_beginning(individual.id)
    if individual.ends_with_participant:
        ending = snapshot.last_participant_ending(individual.id)
    return beginning, ending


def filter_participating_rows(
    rows: Sequence[DisplayRow],
    snapshot: ModelSnapshot,
    activities: Iterable[Activity],
) -> list[DisplayRow]:
    """Keep participants and their ancestors; a participating parent never keeps its children."""
    by_id = snapshot.individuals_by_id()
    participating_keys: set[RowKey] = set()
    participating_ids: set[str] = set()
    for activity in activities:
        for participation in activity.participations:
            participating_keys.add(participation.row_key)
            if participation.installation_id is None:
                participating_ids.add(participation.individual_id)

    ancestors: set[str] = set()
    nested_targets: set[tuple[str, str | None]] = set()
    for component_id, installation_id, context_id in participating_keys:
        component = by_id.get(component_id)
        if component is None:
            continue
        if installation_id is None:
            if component.is_installable:
                for inst in component.installations:
                    _collect_ancestors(inst.target_id, by_id, ancestors)
            continue
        ancestors.add(component_id)
        inst = component.installation(installation_id)
        if inst is None:
            continue
        nested_targets.add((inst.target_id, context_id))
        _collect_ancestors(inst.target_id, by_id, ancestors)

    kept: list[DisplayRow] = []
    for row in rows:
        ref = row.ref
        if isinstance(ref, PlainRow):
            if ref.individual_id in participating_ids or ref.individual_id in ancestors:
                kept.append(row)
            continue
        if (
            ref.key in participating_keys
            or ref.component_id in participating_ids
            or (ref.component_id, ref.installation_id) in nested_targets
            or (ref.component_id, None) in nested_targets
        ):
            kept.append(row)
    return kept


def warn_overlapping_installations(individual: Individual) -> None:
    groups: dict[tuple[str, str | None, str | None], list[Installation]] = defaultdict(list)
    for inst in individual.installations:
        groups[(inst.target_id, inst.system_context_id, inst.sc_installation_context_id)].append(
            inst
        )
    for (target_id, _system_ctx, _sc_ctx), installations in groups.items():
        ordered = sorted(installations, key=lambda inst: inst.beginning)
        for previous, current in zip(ordered, ordered[1:]):
            previous_end = previous.ending if previous.ending is not None else END_OF_TIME
            if current.beginning < previous_end:
                logger.warning(
                    "Overlapping installations %s and %s of %s into %s",
                    previous.id,
                    current.id,
                    individual.id,
                    target_id,
                )


def _collect_ancestors(target_id: str, by_id: dict[str, Individual], ancestors: set[str]) -> None:
    if target_id in ancestors:
        return
    ancestors.add(target_id)
    target = by_id.get(target_id)
    if target is None or target.entity_type != EntityType.SYSTEM_COMPONENT:
        return
    for inst in target.installations:
        _collect_ancestors(inst.target_id, by_id, ancestors)


def _sorted_installations(
    installations: Iterable[Installation], target_id: str
) -> list[Installation]:
    matching = [inst for inst in installations if inst.target_id == target_id]
    return sorted(matching, key=lambda inst: inst.beginning)


def _installation_row(
    resolver: VisibilityResolver,
    component: Individual,
    ref: InstallationRow,
    nesting_level: int,
) -> DisplayRow | None:
    interval = resolver.installation_row_interval(ref)
    if interval is None:
        logger.debug("Installation %s of %s has no visible period", ref.installation_id, ref.component_id)
        return None
    return DisplayRow(
        ref=ref,
        individual=component,
        beginning=interval.start,
        ending=interval.end,
        nesting_level=nesting_level,
    )
