# ratacat

Building blocks for a NEAR blockchain dashboard. It uses only the standard
library.

## Modules

- `ratacat.history`: `History` is a SQLite store of blocks, transactions and
  jump marks. Its calls are synchronous and it works as a context manager.
  - `persist_block(BlockPersist)` writes a block and its `TxPersist` rows in
    one transaction. Rows with the same height or hash are replaced.
  - `search(query, limit)` returns `HistoryHit` records, newest height first.
    It returns at most 500 hits, and an empty list if the query fails. A query
    is made of whitespace-separated terms:
    - `signer:`, `receiver:` or `rcv:`, `acct:` or `account:` (signer or
      receiver), `method:`, `action:` and `hash:` (exact match) are filters.
    - `from:` and `to:` set a height range.
    - Any other term is free text, matched against signer, receiver, hash and
      actions.
    - Matching ignores case.
    - `parse_search_query` exposes the parsed `SearchQuery`.
  - `get_tx(hash)` returns the stored raw JSON.
  - `list_marks`, `put_mark`, `del_mark`, `set_mark_pinned` and `clear_marks`
    manage `PersistedMark` rows.
  - `summarize_methods(actions_json)` turns an actions array into a
    comma-separated list of method or action names.
- `ratacat.marks`: `JumpMarks` keeps labelled `Mark`s in memory and writes each
  change through to a `History`.
  - Labels are `1`–`9` then `a`–`z`. When every label is taken, the label of
    the oldest mark is reused.
  - `list()` is newest first. `next()` and `prev()` cycle through that list.
  - `find_by_context(pane, height, tx_hash)` looks up a mark by transaction
    hash, else by height and pane, else by pane alone.
  - `toggle_pin` and `set_pinned` change whether a mark is pinned.
- `ratacat.json_auto_parse`: `auto_parse_nested_json(value, max_depth,
  current_depth)` replaces strings that hold JSON objects or arrays with their
  parsed value. It recurses until `max_depth`.
- `ratacat.json_pretty`: `pretty(value, space)` renders JSON over several
  lines. It indents by `space` and sorts object keys.
- `ratacat.near_args`: `decode_args_base64(b64, preview_len)` decodes base64
  function-call arguments into a `DecodedArgs`. Its `ArgsKind` is one of the
  following:
  - `JSON`
  - `TEXT`, for mostly printable text
  - `BYTES`, with a hex string and an ASCII preview
  - `EMPTY`
  - `ERROR`
- `ratacat.util_text`: `format_gas_compact` gives values like `30T`. `format_near_compact`
  gives values like `1.5Ⓝ`, and plain yoctoNEAR amounts such as `500y`.
- `ratacat.types`: records for blocks, transactions, action summaries and app
  events, and for websocket payloads (`BlockPayload`, `TxPayload`).
  `parse_ws_payload` reads a payload from JSON and `ws_payload_to_json` writes
  one back.
- `ratacat.models` and `ratacat.storage`: `Project` and `Todo` with their enums.
  `Storage` keeps them in SQLite:
  - On first use it creates an `Inbox` project.
  - By default the database lives at `default_db_path()` in the user's local
    data directory.

## Install

```
pip install .
```

## Examples

```python
from ratacat.history import History, BlockPersist, TxPersist

with History("history.db") as history:
    history.persist_block(BlockPersist(
        height=100, hash="blockhash", ts_ms=1_700_000_000_000,
        txs=[TxPersist(hash="txhash", height=100, signer="alice.near",
                       receiver="bob.near",
                       actions_json='[{"FunctionCall": {"method_name": "ft_transfer"}}]',
                       raw_json='{"hash": "txhash"}')],
    ))
    for hit in history.search("signer:alice method:ft_transfer", 50):
        print(hit.height, hit.hash, hit.methods)
```

```python
from ratacat.history import History
from ratacat.marks import JumpMarks

with History("history.db") as history:
    marks = JumpMarks(history)
    marks.load_from_persistence()
    label = marks.next_auto_label()
    marks.add_or_replace(label, 0, 100, None)
    marks.toggle_pin(label)
```

```python
from ratacat.json_auto_parse import auto_parse_nested_json
from ratacat.json_pretty import pretty

value = auto_parse_nested_json({"msg": '{"action":"swap"}'}, 5, 0)
print(pretty(value, 2))
```

```python
from ratacat.models import Color, Project, Todo
from ratacat.storage import Storage

with Storage("todos.db") as storage:
    project = Project.create("Work", Color.GREEN)
    storage.save_project(project)
    todo = Todo.create(project.id, "Write report")
    todo.toggle_complete()
    storage.save_todo(todo)
    print([(p.name, p.progress_percentage()) for p in storage.get_projects()])
```

## What it does not do

This is a library. It does not provide any of the following:

- a command to run
- a terminal screen
- a connection to a NEAR node or a websocket stream

Blocks and transactions reach `History` only through `persist_block`.
Websocket messages must be received elsewhere and handed to
`parse_ws_payload`.

## Tests

```
pip install .[test]
pytest
```