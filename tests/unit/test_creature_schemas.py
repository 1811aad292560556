"""Unit tests for creature stat block validation."""

import re

import pytest
from pydantic import ValidationError

from campaign_codex.core.messages import CreatureMessages
from campaign_codex.schemas.creature import CreatureCreate, CreatureUpdate


def _stat_block(**overrides):
    data = {
        "name": "Young Red Dragon",
        "size": "Large",
        "creatureType": "dragon",
        "armorClass": {"value": 18, "type": "natural armor"},
        "hitPoints": {"average": 178, "formula": "17d10 + 85"},
        "abilities": {"str": 23, "dex": 10, "con": 21, "int": 14, "wis": 11, "cha": 19},
        "challengeRating": "10",
    }
    data.update(overrides)
    return data


@pytest.mark.unit
def test_complete_stat_block_is_accepted():
    creature = CreatureCreate.model_validate(_stat_block())

    assert creature.creature_type == "dragon"
    assert creature.armor_class.value == 18
    assert creature.abilities.charisma == 19
    assert creature.challenge_rating == "10"


@pytest.mark.unit
def test_create_columns_keep_wire_keys_and_defaults():
    columns = CreatureCreate.model_validate(_stat_block()).to_columns()

    assert columns["abilities"]["str"] == 23
    assert columns["armor_class"] == {"value": 18, "type": "natural armor"}
    assert columns["speeds"] == {}
    assert columns["linked_entities"]["npcs"] == []


@pytest.mark.unit
@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"size": ""}, CreatureMessages.SIZE_REQUIRED),
        ({"creatureType": ""}, CreatureMessages.TYPE_REQUIRED),
        ({"armorClass": {"type": "natural"}}, CreatureMessages.ARMOR_CLASS_REQUIRED),
        ({"hitPoints": {"formula": "2d8"}}, CreatureMessages.HIT_POINTS_REQUIRED),
        ({"abilities": {"str": 10, "dex": 10}}, CreatureMessages.ABILITIES_REQUIRED),
    ],
)
def test_incomplete_stat_block_rejected(overrides, message):
    with pytest.raises(ValidationError, match=re.escape(message)):
        CreatureCreate.model_validate(_stat_block(**overrides))


@pytest.mark.unit
def test_partial_update_only_checks_supplied_sections():
    update = CreatureUpdate.model_validate({"challengeRating": "12"})

    assert update.to_columns() == {"challenge_rating": "12"}


@pytest.mark.unit
def test_partial_update_still_rejects_broken_section():
    with pytest.raises(ValidationError, match=re.escape(CreatureMessages.HIT_POINTS_REQUIRED)):
        CreatureUpdate.model_validate({"hitPoints": {}})
