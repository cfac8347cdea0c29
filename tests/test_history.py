import pytest

from ratacat.history import (
    BlockPersist,
    History,
    PersistedMark,
    TxPersist,
    parse_search_query,
    summarize_methods,
)

FT_ACTIONS = '[{"FunctionCall":{"method_name":"ft_transfer","args":"e30="}}]'
TRANSFER_ACTIONS = '[{"Transfer":{"deposit":"1"}}]'


@pytest.fixture
def history():
    with History(":memory:") as h:
        yield h


@pytest.fixture
def filled(history):
    history.persist_block(
        BlockPersist(
            height=100,
            hash="blockA",
            ts_ms=1000,
            txs=[
                TxPersist("txa1", 100, "alice.near", "token.near", FT_ACTIONS, '{"hash":"txa1"}'),
                TxPersist("txa2", 100, "bob.near", "carol.near", TRANSFER_ACTIONS, '{"hash":"txa2"}'),
            ],
        )
    )
    history.persist_block(
        BlockPersist(
            height=200,
            hash="blockB",
            ts_ms=2000,
            txs=[TxPersist("TXB1", 200, "alice.near", "dex.near", TRANSFER_ACTIONS, '{"hash":"TXB1"}')],
        )
    )
    return history


def test_parse_search_query_keys_and_free_text():
    sq = parse_search_query("signer:Alice.near rcv:Bob account:X from:10 to:abc Hello Foo:Bar")
    assert sq.signer == ["alice.near"]
    assert sq.receiver == ["bob"]
    assert sq.acct == ["x"]
    assert sq.from_height == 10
    assert sq.to_height is None
    assert sq.free == ["hello", "foo:bar"]


def test_parse_search_query_later_height_overrides():
    sq = parse_search_query("from:5 from:nope to:7 to:+9")
    assert sq.from_height is None
    assert sq.to_height == 9


def test_summarize_methods():
    actions = FT_ACTIONS[:-1] + ',{"Transfer":{"deposit":"1"}},{"b":1,"a":2}]'
    assert summarize_methods(actions) == "ft_transfer, Transfer, a"
    assert summarize_methods("not json") == ""
    assert summarize_methods('{"Transfer":{}}') == ""


def test_search_by_signer_orders_newest_first(filled):
    hits = filled.search("signer:ALICE", 50)
    assert [h.hash for h in hits] == ["TXB1", "txa1"]
    assert hits[0].height == 200
    assert hits[0].ts_ms == 2000
    assert hits[1].methods == "ft_transfer"


def test_search_without_filters_returns_all(filled):
    hits = filled.search("", 50)
    assert [h.hash for h in hits] == ["TXB1", "txa1", "txa2"]


def test_search_limit(filled):
    assert len(filled.search("", 1)) == 1


def test_search_height_range(filled):
    assert [h.hash for h in filled.search("from:150", 50)] == ["TXB1"]
    assert sorted(h.hash for h in filled.search("to:150", 50)) == ["txa1", "txa2"]


def test_search_hash_exact_case_insensitive(filled):
    assert [h.hash for h in filled.search("hash:txb1", 50)] == ["TXB1"]
    assert filled.search("hash:txb", 50) == []


def test_search_method_and_account(filled):
    assert [h.hash for h in filled.search("method:ft_transfer", 50)] == ["txa1"]
    assert [h.hash for h in filled.search("acct:carol", 50)] == ["txa2"]


def test_search_free_text_all_terms_required(filled):
    assert [h.hash for h in filled.search("alice dex", 50)] == ["TXB1"]
    assert filled.search("alice carol", 50) == []


def test_free_text_skips_rows_with_null_fields(history):
    history.persist_block(BlockPersist(1, "b", 5, [TxPersist("only", 1, "alice.near", None, None, None)]))
    assert history.search("alice", 10) == []
    hits = history.search("signer:alice", 10)
    assert [h.hash for h in hits] == ["only"]
    assert hits[0].methods is None


def test_get_tx(filled):
    assert filled.get_tx("txa2") == '{"hash":"txa2"}'
    assert filled.get_tx("missing") is None


def test_persist_replaces_existing_tx(filled):
    filled.persist_block(BlockPersist(100, "blockA", 1000, [TxPersist("txa1", 100, raw_json="new")]))
    assert filled.get_tx("txa1") == "new"


def test_marks_crud(history):
    history.put_mark(PersistedMark("a", 1, 10, None, 100, False))
    history.put_mark(PersistedMark("b", 2, None, "tx", 200, True))
    marks = history.list_marks()
    assert [m.label for m in marks] == ["b", "a"]
    assert marks[0] == PersistedMark("b", 2, None, "tx", 200, True)

    history.set_mark_pinned("a", True)
    assert all(m.pinned for m in history.list_marks())

    history.del_mark("b")
    assert [m.label for m in history.list_marks()] == ["a"]

    history.clear_marks()
    assert history.list_marks() == []


def test_data_survives_reopen(tmp_path):
    path = str(tmp_path / "hist.db")
    with History(path) as h:
        h.persist_block(BlockPersist(7, "h7", 70, [TxPersist("t7", 7, raw_json="raw")]))
        h.put_mark(PersistedMark("x", 0, 7, None, 1, True))
    with History(path) as h:
        assert h.get_tx("t7") == "raw"
        assert h.list_marks() == [PersistedMark("x", 0, 7, None, 1, True)]


def test_reads_after_close_return_empty():
    h = History(":memory:")
    h.close()
    assert h.search("", 10) == []
    assert h.list_marks() == []
    assert h.get_tx("x") is None