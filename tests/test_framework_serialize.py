from __future__ import annotations

import pytest

from framework.errors import MalformedMessageError
from framework.events import EventType, LobbyEvent
from framework.serialize import json_dumps, json_loads_object


def test_json_dumps_flattens_events_deterministically() -> None:
    event = LobbyEvent.create(EventType.PLAYER_MOVED, playerId="p1", row=2, col=3)
    assert json_dumps(event) == '{"col":3,"playerId":"p1","row":2,"type":"PLAYER_MOVED"}'


def test_json_loads_object_accepts_text_and_bytes() -> None:
    assert json_loads_object('{"type": "START_GAME"}') == {"type": "START_GAME"}
    assert json_loads_object(b'{"row": 1}') == {"row": 1}


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", '"text"', "42"])
def test_json_loads_object_rejects_non_objects(raw: str) -> None:
    with pytest.raises(MalformedMessageError):
        json_loads_object(raw)
