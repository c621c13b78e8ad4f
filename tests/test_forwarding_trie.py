from __future__ import annotations

import pytest

import core.forwarding_trie as forwarding_trie
from core.forwarding_trie import ForwardingTrie, build_trie
from core.models import ForwardingRule


def _resolve(trie: ForwardingTrie, number: str) -> str:
    result = trie.get(number)
    assert len(result) == 1
    return result[0]


def test_empty_trie_resolves_numbers_to_themselves() -> None:
    trie = ForwardingTrie()
    assert _resolve(trie, "123") == "123"
    assert len(trie) == 0


def test_prefix_is_replaced_and_suffix_kept() -> None:
    trie = ForwardingTrie()
    assert trie.add("13", "5")
    assert _resolve(trie, "1313") == "513"
    assert _resolve(trie, "13") == "5"
    assert _resolve(trie, "1") == "1"
    assert _resolve(trie, "14") == "14"


def test_overwrite_replaces_previous_target() -> None:
    trie = ForwardingTrie()
    assert trie.add("12", "7")
    assert trie.add("12", "89")
    assert _resolve(trie, "12") == "89"
    assert _resolve(trie, "123") == "893"
    assert len(trie) == 1


def test_overwrite_leaves_other_prefixes_alone() -> None:
    trie = ForwardingTrie()
    trie.add("1", "9")
    trie.add("123", "4")
    trie.add("12", "5")
    trie.add("12", "6")
    assert _resolve(trie, "1") == "9"
    assert _resolve(trie, "1234") == "44"
    assert _resolve(trie, "129") == "69"


def test_longest_prefix_wins() -> None:
    trie = ForwardingTrie()
    trie.add("12", "1")
    trie.add("123", "2")
    assert _resolve(trie, "1234") == "24"
    assert _resolve(trie, "1244") == "144"


def test_shorter_rule_applies_when_longer_path_breaks_off() -> None:
    trie = ForwardingTrie()
    trie.add("1", "0")
    trie.add("12345", "9")
    # Node path 1-2-3 exists but holds no rule; the match stays at "1".
    assert _resolve(trie, "12399") == "02399"


@pytest.mark.parametrize(
    "prefix, target",
    [("", "1"), ("1", ""), ("12a", "1"), ("1", "1b"), (None, "1"), ("1", None), ("600", "600")],
)
def test_add_rejects_invalid_and_self_mapping(prefix, target) -> None:
    trie = ForwardingTrie()
    assert not trie.add(prefix, target)
    assert len(trie) == 0


def test_self_mapping_leaves_number_unforwarded() -> None:
    trie = ForwardingTrie()
    assert not trie.add("600", "600")
    assert _resolve(trie, "600") == "600"


def test_remove_deletes_whole_subtree() -> None:
    trie = ForwardingTrie()
    trie.add("123", "5")
    trie.add("1234", "6")
    trie.remove("123")
    assert _resolve(trie, "123") == "123"
    assert _resolve(trie, "1234") == "1234"
    assert len(trie) == 0


def test_remove_keeps_shorter_and_sibling_rules() -> None:
    trie = ForwardingTrie()
    trie.add("1", "7")
    trie.add("12", "8")
    trie.add("13", "9")
    trie.remove("12")
    assert _resolve(trie, "125") == "725"
    assert _resolve(trie, "135") == "95"
    assert "12" not in trie
    assert "1" in trie and "13" in trie


def test_remove_ignores_invalid_and_missing_numbers() -> None:
    trie = ForwardingTrie()
    trie.add("12", "3")
    trie.remove("")
    trie.remove("1x")
    trie.remove(None)
    trie.remove("999")
    trie.remove("1234")
    assert _resolve(trie, "12") == "3"


def test_remove_of_prefix_above_rules() -> None:
    trie = ForwardingTrie()
    trie.add("4321", "1")
    trie.add("4399", "2")
    trie.remove("43")
    assert len(trie) == 0
    assert _resolve(trie, "43219") == "43219"


def test_get_invalid_number_is_degenerate() -> None:
    trie = ForwardingTrie()
    trie.add("1", "2")
    for number in ["", "1a", None]:
        result = trie.get(number)
        assert result.is_degenerate
        assert len(result) == 1
        assert result.get(0) is None


def test_star_and_hash_are_ordinary_symbols() -> None:
    trie = ForwardingTrie()
    trie.add("*#", "0")
    trie.add("#", "*")
    assert _resolve(trie, "*#1") == "01"
    assert _resolve(trie, "#12") == "*12"
    assert _resolve(trie, "*1") == "*1"


def test_results_survive_later_mutation() -> None:
    trie = ForwardingTrie()
    trie.add("1", "2")
    before = trie.get("19")
    trie.add("1", "3")
    trie.remove("1")
    assert before == ["29"]


def test_rules_are_listed_in_symbol_order() -> None:
    trie = ForwardingTrie()
    trie.add("#", "1")
    trie.add("2", "3")
    trie.add("*", "4")
    trie.add("21", "5")
    trie.add("10", "6")
    assert list(trie.rules()) == [
        ForwardingRule("10", "6"),
        ForwardingRule("2", "3"),
        ForwardingRule("21", "5"),
        ForwardingRule("*", "4"),
        ForwardingRule("#", "1"),
    ]
    assert len(trie) == 5


def test_delete_drops_every_rule() -> None:
    trie = ForwardingTrie()
    trie.add("1", "2")
    trie.add("34", "5")
    trie.delete()
    assert len(trie) == 0
    assert _resolve(trie, "1") == "1"


def test_out_of_memory_rolls_back_partial_path(monkeypatch) -> None:
    trie = ForwardingTrie()
    trie.add("12", "9")

    created = []
    real_node = forwarding_trie._Node

    def _flaky_node():
        if len(created) == 2:
            raise MemoryError
        created.append(None)
        return real_node()

    monkeypatch.setattr(forwarding_trie, "_Node", _flaky_node)

    assert not trie.add("12345", "7")
    monkeypatch.setattr(forwarding_trie, "_Node", real_node)

    assert list(trie.rules()) == [ForwardingRule("12", "9")]
    # The nodes built for "123" and "1234" were cut off again.
    root = trie._root
    node_12 = root.children[1].children[2]
    assert all(child is None for child in node_12.children)


def test_out_of_memory_on_first_new_node(monkeypatch) -> None:
    trie = ForwardingTrie()

    def _no_memory():
        raise MemoryError

    monkeypatch.setattr(forwarding_trie, "_Node", _no_memory)
    assert not trie.add("5", "6")
    assert all(child is None for child in trie._root.children)


def test_build_trie_skips_disabled_and_rejected_rules(caplog) -> None:
    trie = build_trie(
        [
            {"prefix": "13", "target": "5"},
            {"prefix": "7", "target": "8", "enabled": False},
            {"prefix": "9", "target": "9"},
            {"prefix": "4x", "target": "1"},
            {"target": "1"},
        ]
    )
    assert list(trie.rules()) == [ForwardingRule("13", "5")]
    assert caplog.text.count("Skipping rejected rule") == 3
