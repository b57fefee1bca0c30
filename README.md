# aworld

A small simulation world. Characters walk around a randomly generated
terrain, pick up and eat food, and attack one another. Clients talk to the
world with JSON datagrams over UDP; the server sends each logged-in client a
JSON update describing the entities that changed.

## Installing

    pip install .

For running the tests:

    pip install ".[test]"
    pytest

## Running the server

    aworld-server

The server listens for queries on `127.0.0.1:34254` and sends updates from
`127.0.0.1:34249`. Both can be changed:

    aworld-server --listen 127.0.0.1:5000 --send-from 127.0.0.1:5001

On start it builds a 50 × 50 terrain and scatters up to 19 pieces of food
over its floor. It runs until interrupted.

## Queries

Each datagram is one JSON object with the fields `salt` (integer), `addr`
(string), `kind` (string) and `payload` (any JSON value):

    {"salt": 1, "addr": "127.0.0.1:40000", "kind": "login", "payload": {}}

`addr` is where updates for this client are sent; `addr` and `salt` together
identify the connection. The kinds and their payloads are:

| kind         | payload                                                          |
|--------------|------------------------------------------------------------------|
| `login`      | `{"character_id": integer or null, "password": string or null}`  |
| `forward`    | `{"speed": number}`                                              |
| `backward`   | `{"speed": number}`                                              |
| `turn_left`  | `{"angle": number}`                                              |
| `turn_right` | `{"angle": number}`                                              |
| `attack`     | any value                                                        |
| `pickup`     | any value                                                        |
| `use_item`   | `{"item_index": integer}`                                        |

- A `login` without a `character_id` creates a new character at a random
  floor position; with one, it takes over an existing character that no other
  connection holds. A connection can log in only once.
- `forward` moves the character; a character in the way is pushed instead,
  and a wall pushes the character back.
- `attack` and `use_item` first build up a charge, one step per query; an
  attack lands (10 damage to the character in front) once the attack charge
  reaches 50, and an item is used once the item charge reaches 25. Both
  charges drain over time. A character killed by an attack leaves food behind.
- `pickup` takes the dropped item directly in front of the character.
- Only food can be used; eating adds its amount to the character's appetite.

Queries that cannot be parsed, and actions that fail, are reported on
standard error and otherwise ignored.

## Updates

Every logged-in client receives objects of this shape:

    {"character_id": 7, "terrain": null, "characters": [...], "items": [...]}

`character_id` is the client's own character. `terrain` carries `width`,
`height`, `origin` and the cell `data` (0 for floor, 1 for wall) when the
terrain is among the changed entities, as it is right after a login. Each
character entry holds its id, position, angle, hp, appetite, whether it is
dead, its items and its attack charge; each item entry holds its id, name,
position and whether it lies on the ground.

## Using the world from Python

The world can be driven without the network:

    from aworld.connection import Connection
    from aworld.environment import create_world
    from aworld.mappers import query_to_action
    from aworld.query import Query
    from aworld.transactions import call_transaction_with

    context = create_world()
    conn = Connection(addr="127.0.0.1:40000", salt=1)

    for text in (
        '{"salt": 1, "addr": "127.0.0.1:40000", "kind": "login", "payload": {}}',
        '{"salt": 1, "addr": "127.0.0.1:40000", "kind": "forward", "payload": {"speed": 1.0}}',
    ):
        action = query_to_action(Query.from_json(text))
        call_transaction_with(conn, context, action)

    changed = context.take_mutated_entities()

`query_to_action` raises `aworld.mappers.MappingError` for malformed
payloads; transactions raise `aworld.context.WorldError` when an action
cannot be carried out. `aworld.server.build_update_body` and
`aworld.server.render_update` produce the update messages from a list of
changed entities.

`aworld.schedule.make_schedules()` returns the periodic jobs the server runs
against the world (charge drain every 10 ms and removal of dead characters
every 50 ms); call `exec(context)` on each of them regularly. The module
`aworld.batches` also holds a `hunger` job, which is not among them.

## What it does not do

- Nothing is stored: the world, its characters and items live only in memory
  and are lost when the server stops.
- Passwords sent with `login` are read but never checked.
- `backward` queries are accepted but not carried out; they are reported as
  unsupported. Weapons can be spawned but not used.
- Relations between characters and their dispatchers exist as data types and
  functions, but no query or job changes them.