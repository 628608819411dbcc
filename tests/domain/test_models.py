from __future__ import annotations

from collections.abc import Callable

import pytest
from pydantic import ValidationError

from domain.models import (
    BEFORE_TIME,
    END_OF_TIME,
    Activity,
    EntityType,
    Individual,
    InstallationRow,
    ModelSnapshot,
)
from tests.helpers.snapshot_fixtures import (
    IC_IN_SLOT,
    activity,
    individual,
    installation_hierarchy,
    load_snapshot_fixture,
)


def test_snapshot_reads_camel_case_payload() -> None:
    snapshot = ModelSnapshot.model_validate(
        {
            "individuals": installation_hierarchy(),
            "activities": [activity("a", 12, 18, [IC_IN_SLOT], partOf=None)],
        }
    )

    ic = snapshot.individual("ic")
    assert ic is not None
    assert ic.entity_type is EntityType.INSTALLED_COMPONENT
    assert ic.is_installable
    installation = ic.installation("ic1")
    assert installation is not None
    assert installation.sc_installation_context_id == "sc1"
    assert installation.ending is None
    assert snapshot.activities[0].participations[0].row_key == ("ic", "ic1", "sc1")


def test_individual_defaults_are_unbounded() -> None:
    entity = Individual(id="e")

    assert (entity.beginning, entity.ending) == (BEFORE_TIME, END_OF_TIME)
    assert entity.entity_type is EntityType.INDIVIDUAL
    assert not entity.is_installable


def test_individual_must_not_end_before_it_begins() -> None:
    with pytest.raises(ValidationError, match="begins after it ends"):
        Individual(id="e", beginning=10, ending=5)


def test_activity_needs_positive_duration() -> None:
    with pytest.raises(ValidationError, match="must begin before it ends"):
        Activity(id="a", beginning=5, ending=5)


def test_duplicate_participations_collapse_per_row() -> None:
    parsed = Activity.model_validate(
        activity(
            "a",
            0,
            10,
            [
                "p",
                {"individualId": "p", "role": {"id": "r", "name": "Lead"}},
                "q",
                IC_IN_SLOT,
                {"individualId": "ic"},
            ],
        )
    )

    assert [p.row_key for p in parsed.participations] == [
        ("p", None, None),
        ("q", None, None),
        ("ic", "ic1", "sc1"),
        ("ic", None, None),
    ]
    assert parsed.participations[0].role is not None


@pytest.mark.parametrize("field", ["individuals", "activities"])
def test_duplicate_ids_are_rejected(
    field: str, snapshot_factory: Callable[..., ModelSnapshot]
) -> None:
    payload = {
        "individuals": [individual("a"), individual("a")] if field == "individuals" else [],
        "activities": [activity("x", 0, 1, []), activity("x", 1, 2, [])]
        if field == "activities"
        else [],
    }

    with pytest.raises(ValueError, match="Duplicate"):
        snapshot_factory(**payload)


def test_participant_queries(snapshot_factory: Callable[..., ModelSnapshot]) -> None:
    snapshot = snapshot_factory(
        [individual("p"), individual("q")],
        [
            activity("a", 5, 10, ["p"]),
            activity("b", 2, 7, ["p"], partOf="a"),
            activity("c", 8, 20, ["p", "q"], partOf="a"),
        ],
    )

    assert snapshot.earliest_participant_beginning("p") == 2
    assert snapshot.last_participant_ending("p") == 20
    assert snapshot.earliest_participant_beginning("nobody") == BEFORE_TIME
    assert snapshot.last_participant_ending("nobody") == END_OF_TIME
    assert snapshot.has_participants("q")
    assert not snapshot.has_participants("nobody")
    assert [a.id for a in snapshot.parts_of("a")] == ["b", "c"]
    assert snapshot.has_parts("a") and not snapshot.has_parts("b")


def test_installation_row_ids_are_composite() -> None:
    assert InstallationRow("sc", "s", "sc1").row_id == "sc__installed_in__s__sc1"
    assert InstallationRow("ic", "sc", "ic1", "sc1").key == ("ic", "ic1", "sc1")


def test_example_snapshot_loads() -> None:
    snapshot = load_snapshot_fixture("crane_lift.json")

    assert snapshot.individual("crane") is not None
    assert snapshot.activity("sling") is not None
    assert snapshot.activity("sling").part_of == "lift"
