"""UDP front end: receives client queries and broadcasts world updates."""

from __future__ import annotations

import argparse
import json
import math
import queue
import socket
import sys
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from aworld.actions import Action
from aworld.connection import Connection
from aworld.context import Context, WorldError
from aworld.environment import create_world
from aworld.mappers import MappingError, query_to_action
from aworld.models import CharacterLocal, ItemLocal
from aworld.query import Query
from aworld.schedule import make_schedules
from aworld.terrain import TerrainLocal
from aworld.transactions import call_transaction_with
from aworld.utils import debug, error, log

RECEIVE_ADDRESS = "127.0.0.1:34254"
SEND_ADDRESS = "127.0.0.1:34249"
_BUFFER_SIZE = 8192
_BROADCAST_INTERVAL = 0.005
_IDLE_INTERVAL = 0.001
_VERSION = "0.1.0"

QueuedAction = tuple[str, int, Action]


def _number(value: float) -> str:
    """Render a number the way the wire format expects: integral floats lose '.0'."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _boolean(value: bool) -> str:
    return "true" if value else "false"


def _int_list(values: Iterable[int]) -> str:
    return "[" + ", ".join(str(int(v)) for v in values) + "]"


def _string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


@dataclass(frozen=True)
class CharacterView:
    """What clients are told about a character."""

    character_id: int
    x: float
    y: float
    angle: float
    hp: int
    appetite: int
    is_dead: bool
    items: list[int] = field(default_factory=list)
    attack_charge: float = 0.0

    def to_json(self) -> str:
        return (
            f'{{"character_id": {self.character_id}, "x": {_number(self.x)}, '
            f'"y": {_number(self.y)}, "angle": {_number(self.angle)}, '
            f'"hp": {self.hp}, "appetite": {self.appetite}, '
            f'"is_dead": {_boolean(self.is_dead)}, "items": {_int_list(self.items)}, '
            f'"attack_charge": {_number(self.attack_charge)} }}'
        )


@dataclass(frozen=True)
class TerrainView:
    """What clients are told about the terrain."""

    width: int
    height: int
    data: list[int]
    origin: tuple[int, int] = (0, 0)

    def to_json(self) -> str:
        ox, oy = self.origin
        return (
            f'{{"width": {self.width}, "height": {self.height}, '
            f'"origin": {{"x": {ox}, "y": {oy}}}, "data": {_int_list(self.data)}}}'
        )


@dataclass(frozen=True)
class ItemView:
    """What clients are told about an item."""

    item_id: int
    name: str
    x: float
    y: float
    is_dropped: bool

    def to_json(self) -> str:
        return (
            f'{{"item_id": {self.item_id}, "name": {_string(self.name)}, '
            f'"x": {_number(self.x)}, "y": {_number(self.y)}, '
            f'"is_dropped": {_boolean(self.is_dropped)}}}'
        )


def _character_view(local: CharacterLocal) -> CharacterView:
    return CharacterView(
        character_id=local.entity_id,
        x=local.x.read(),
        y=local.y.read(),
        angle=local.angle.read(),
        hp=local.hp.read(),
        appetite=local.appetite.read(),
        is_dead=local.is_dead.read(),
        items=list(local.items.read()),
        attack_charge=local.attack_charge.read(),
    )


def _terrain_view(local: TerrainLocal) -> TerrainView:
    return TerrainView(
        width=local.model.width,
        height=local.model.height,
        data=list(local.raw.read()),
    )


def _item_view(local: ItemLocal) -> ItemView:
    return ItemView(
        item_id=local.entity_id,
        name=local.model.name,
        x=local.x.read(),
        y=local.y.read(),
        is_dropped=local.is_dropped.read(),
    )


def _json_list(views: list) -> str:
    return "[" + ", ".join(view.to_json() for view in views) + "]"


def build_update_body(entities: Iterable[object]) -> str | None:
    """Describe mutated characters, items and terrain; None when none of them changed."""
    characters: list[CharacterView] = []
    terrains: list[TerrainView] = []
    items: list[ItemView] = []
    for entity in entities:
        if isinstance(entity, CharacterLocal):
            characters.append(_character_view(entity))
        elif isinstance(entity, TerrainLocal):
            terrains.append(_terrain_view(entity))
        elif isinstance(entity, ItemLocal):
            items.append(_item_view(entity))
    if not (characters or terrains or items):
        return None
    terrain = terrains[0].to_json() if terrains else "null"
    return (
        f'"terrain": {terrain}, "characters": {_json_list(characters)}, '
        f'"items": {_json_list(items)}'
    )


def render_update(character_id: int, body: str) -> str:
    """Wrap an update body into the message sent to one client."""
    return f'{{"character_id": {character_id}, {body}}}'


def _parse_address(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep or not host:
        raise ValueError(f"invalid socket address: {addr!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, int(port)


class UdpSender:
    """A bound UDP socket used to push updates to clients."""

    def __init__(self, addr: str) -> None:
        self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.socket.bind(_parse_address(addr))

    def send(self, data: str, addr: str) -> int:
        """Send text to ``host:port``; return the number of bytes sent."""
        return self.socket.sendto(data.encode("utf-8"), _parse_address(addr))

    def close(self) -> None:
        self.socket.close()

    def __enter__(self) -> UdpSender:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class UdpReceiver:
    """A bound UDP socket turning incoming queries into queued actions."""

    def __init__(self, addr: str, actions: queue.Queue) -> None:
        self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.socket.bind(_parse_address(addr))
        self.queue = actions

    def receive_one(self) -> QueuedAction | None:
        """Wait for one datagram; queue and return its action, or None if it was invalid."""
        debug("waiting datagram...")
        data, _source = self.socket.recvfrom(_BUFFER_SIZE)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            error(repr(exc))
            return None
        log("RECEIVE", _string(text))
        try:
            query = Query.from_json(text)
        except ValueError as exc:
            error(f"Couldn't parse query because {exc}")
            return None
        try:
            action = query_to_action(query)
        except MappingError as exc:
            error(f"Couldn't parse payload because expected {exc}")
            return None
        entry = (query.addr, query.salt, action)
        self.queue.put(entry)
        return entry

    def serve_forever(self) -> None:
        while True:
            self.receive_one()

    def close(self) -> None:
        self.socket.close()

    def __enter__(self) -> UdpReceiver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _run_actions(actions: queue.Queue, context: Context, lock: threading.Lock) -> None:
    while True:
        addr, salt, action = actions.get()
        log("ACTION", f"{action!r} from {addr}/{salt}")
        connection = Connection(addr=addr, salt=salt)
        with lock:
            try:
                call_transaction_with(connection, context, action)
            except WorldError as exc:
                error(str(exc))


def _run_broadcast(sender: UdpSender, context: Context, lock: threading.Lock) -> None:
    while True:
        with lock:
            mutated = context.take_mutated_entities()
            body = build_update_body(mutated)
            recipients = list(context.connection_to_character_id.items())
        if body is None:
            time.sleep(_IDLE_INTERVAL)
            continue
        for connection, character_id in recipients:
            try:
                sender.send(render_update(character_id, body), connection.addr)
            except OSError as exc:
                error(repr(exc))
                raise
        time.sleep(_BROADCAST_INTERVAL)


def _run_schedules(context: Context, lock: threading.Lock) -> None:
    schedules = make_schedules()
    while True:
        for schedule in schedules:
            with lock:
                mutations = schedule.exec(context)
                if mutations is not None:
                    context.mark_mutations(mutations)
        time.sleep(_IDLE_INTERVAL)


def main(argv: list[str] | None = None) -> int:
    """Start the world server and serve until interrupted."""
    parser = argparse.ArgumentParser(prog="aworld-server", description="Run the world server.")
    parser.add_argument("--listen", default=RECEIVE_ADDRESS, help="address queries arrive at")
    parser.add_argument("--send-from", default=SEND_ADDRESS, help="address updates leave from")
    args = parser.parse_args(argv)

    actions: queue.Queue = queue.Queue()
    receiver = UdpReceiver(args.listen, actions)
    sender = UdpSender(args.send_from)
    host, port = receiver.socket.getsockname()[:2]
    print(f"Aworld Data server v{_VERSION} has started on {host}:{port}")

    context = create_world()
    lock = threading.Lock()
    workers = (
        threading.Thread(target=_run_actions, args=(actions, context, lock), daemon=True),
        threading.Thread(target=_run_broadcast, args=(sender, context, lock), daemon=True),
        threading.Thread(target=_run_schedules, args=(context, lock), daemon=True),
    )
    for worker in workers:
        worker.start()
    try:
        receiver.serve_forever()
    except KeyboardInterrupt:
        return 0
    finally:
        receiver.close()
        sender.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())