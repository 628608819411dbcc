from __future__ import annotations

from collections.abc import Mapping

from domain.models import (
    END_OF_TIME,
    Activity,
    DisplayRow,
    EntityType,
    Individual,
    Installation,
    InstallationRow,
    Interval,
    ModelSnapshot,
    is_bounded_beginning,
    is_bounded_ending,
)

UNBOUNDED = Interval(0, END_OF_TIME)


class VisibilityResolver:
    """Works out when a participation is actually drawn.

    Installation rows are cropped by the installation period and by the
    effective bounds of whatever the component is installed in. A
    SystemComponent target nested in a System installation inherits that
    installation's period and the System's own extent, floored at zero.
    """

    def __init__(self, individuals: Mapping[str, Individual]) -> None:
        self.individuals = individuals

    @classmethod
    def for_snapshot(cls, snapshot: ModelSnapshot) -> "VisibilityResolver":
        return cls(snapshot.individuals_by_id())

    def entity_bounds(self, individual: Individual) -> Interval:
        return Interval(max(0.0, individual.beginning), individual.ending)

    def target_bounds(
        self,
        target_id: str,
        context_installation_id: str | None = None,
        _seen: frozenset[str] = frozenset(),
    ) -> Interval:
        target = self.individuals.get(target_id)
        if target is None:
            return UNBOUNDED
        bounds = self.entity_bounds(target)
        if (
            target.entity_type == EntityType.SYSTEM_COMPONENT
            and context_installation_id
            and context_installation_id not in _seen
        ):
            inst = target.installation(context_installation_id)
            if inst is not None:
                bounds = bounds.intersect(
                    self.installation_interval(inst, _seen | {context_installation_id})
                )
        return bounds

    def installation_interval(
        self, installation: Installation, _seen: frozenset[str] = frozenset()
    ) -> Interval:
        """Installation period cropped to the target, with a missing ending inherited from it."""
        target = self.target_bounds(
            installation.target_id, installation.sc_installation_context_id, _seen
        )
        ending = installation.ending if installation.ending is not None else target.end
        return Interval(max(0.0, installation.beginning), ending).intersect(target)

    def installation_row_interval(self, ref: InstallationRow) -> Interval | None:
        component = self.individuals.get(ref.component_id)
        if component is None:
            return None
        installation = component.installation(ref.installation_id)
        if installation is None:
            return None
        target = self.target_bounds(ref.target_id, ref.context_installation_id)
        ending = installation.ending if installation.ending is not None else target.end
        interval = Interval(max(0.0, installation.beginning), ending).intersect(target)
        if interval.is_empty:
            return None
        return interval

    def visible_interval(self, activity: Activity, row: DisplayRow) -> Interval | None:
        interval = Interval(activity.beginning, activity.ending)
        if isinstance(row.ref, InstallationRow):
            row_interval = self.installation_row_interval(row.ref)
            if row_interval is None:
                return None
            interval = interval.intersect(row_interval)
        else:
            individual = row.individual
            start, end = interval.start, interval.end
            if not individual.begins_with_participant and is_bounded_beginning(
                individual.beginning
            ):
                start = max(start, individual.beginning)
            if not individual.ends_with_participant and is_bounded_ending(individual.ending):
                end = min(end, individual.ending)
            interval = Interval(start, end)
        if interval.is_empty:
            return None
        return interval
