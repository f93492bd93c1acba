"""Tests for the reactive Node and ListNode tree."""

from ticketboard.model.node import ListNode, Node


# --- Node basics ---


def test_node_set_and_get():
    node = Node()
    node.status = "idle"
    assert node.status == "idle"


def test_node_get_missing_returns_none():
    assert Node().nonexistent is None


def test_node_set_none_deletes():
    node = Node(error="boom")
    node.error = None
    assert node.error is None
    assert "error" not in node


def test_node_auto_wrap_dict():
    node = Node()
    node.sync = {"status": "idle"}
    assert isinstance(node.sync, Node)
    assert node.sync.status == "idle"
    assert node.sync._parent is node
    assert node.sync._key == "sync"


def test_node_keeps_falsy_values():
    node = Node(generation=0)
    assert node.generation == 0
    assert "generation" in node


def test_node_watch_fires_on_change():
    node = Node(status="idle")
    calls = []
    node.watch("status", lambda n, k, old, new: calls.append((k, old, new)))
    node.status = "pending"
    assert calls == [("status", "idle", "pending")]


def test_node_watch_skips_same_value():
    node = Node(status="idle")
    calls = []
    node.watch("status", lambda *a: calls.append(a))
    node.status = "idle"
    assert calls == []


def test_node_unwatch():
    node = Node()
    calls = []
    unwatch = node.watch("status", lambda *a: calls.append(a))
    unwatch()
    node.status = "failed"
    assert calls == []


def test_node_change_bubbles_to_parent():
    board = Node(sync={"status": "idle"})
    calls = []
    board.watch("sync", lambda n, k, old, new: calls.append((n, k, new)))
    board.sync.status = "pending"
    assert calls == [(board.sync, "status", "pending")]


def test_node_path():
    board = Node(sync={"status": "idle"})
    assert board.sync.path == "sync"


# --- ListNode ---


def test_listnode_keys_are_strings():
    items = ListNode()
    items[5] = "five"
    assert items["5"] == "five"
    assert items[5] == "five"
    assert 5 in items
    assert items.keys() == ["5"]


def test_listnode_preserves_order():
    items = ListNode()
    items["b"] = 2
    items["a"] = 1
    items["b"] = 3
    assert items.keys() == ["b", "a"]
    assert list(items) == [3, 1]


def test_listnode_set_none_deletes():
    items = ListNode()
    items["a"] = 1
    items["a"] = None
    assert "a" not in items
    assert len(items) == 0


def test_listnode_delete_missing_is_noop():
    items = ListNode()
    calls = []
    items.watch("a", lambda *a: calls.append(a))
    items["a"] = None
    assert calls == []


def test_listnode_insert_at_position():
    items = ListNode()
    for key in "abc":
        items[key] = key.upper()
    items.insert("d", "D", 1)
    assert items.keys() == ["a", "d", "b", "c"]


def test_listnode_insert_existing_repositions():
    items = ListNode()
    for key in "abc":
        items[key] = key.upper()
    items.insert("c", "C2", 0)
    assert items.keys() == ["c", "a", "b"]
    assert items["c"] == "C2"


def test_listnode_insert_past_end_appends():
    items = ListNode()
    items["a"] = 1
    items.insert("b", 2, 10)
    assert items.keys() == ["a", "b"]


def test_listnode_move_fires_structural_event():
    items = ListNode()
    for key in "abc":
        items[key] = key
    calls = []
    items.watch("*", lambda n, k, old, new: calls.append((old, new)))
    items.move("c", 0)
    assert items.keys() == ["c", "a", "b"]
    assert calls == [(["a", "b", "c"], ["c", "a", "b"])]


def test_listnode_move_to_same_place_is_silent():
    items = ListNode()
    for key in "ab":
        items[key] = key
    calls = []
    items.watch("*", lambda *a: calls.append(a))
    items.move("b", 1)
    assert calls == []


def test_listnode_index():
    items = ListNode()
    items["a"] = 1
    items["b"] = 2
    assert items.index("b") == 1


def test_listnode_change_bubbles_through_node():
    tickets = ListNode()
    column = Node(key="abierto", tickets=tickets)
    calls = []
    column.watch("tickets", lambda n, k, old, new: calls.append(k))
    column.tickets["1"] = "ticket"
    assert calls == ["1"]


def test_listnode_replace_keeps_watchers():
    items = ListNode()
    items["a"] = 1
    items["b"] = 2
    calls = []
    items.watch("*", lambda n, k, old, new: calls.append(new))

    other = ListNode()
    other["c"] = 3
    other["a"] = 1
    items.replace(other)

    assert items.keys() == ["c", "a"]
    assert items["b"] is None
    assert calls == [["c", "a"]]
