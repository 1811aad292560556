from enum import Enum


class Visibility(str, Enum):
    """Player-facing exposure of a campaign record."""

    dm_only = "dm-only"
    player_visible = "player-visible"
    hidden = "hidden"


VISIBILITY_VALUES = tuple(member.value for member in Visibility)
