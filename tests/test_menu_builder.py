"""
Unit tests for MenuTreeBuilder.
Covers nesting, ordering, dangling parents, duplicates and cycles.
"""

import logging

import pytest

from conftest import decl, make_registry, shape
from robyn_menu.core.discovery import MenuDiscovery
from robyn_menu.core.errors import DuplicateIdentity, CyclicReference
from robyn_menu.core.menu import MenuTreeBuilder, MenuNode


class CountingDiscovery(MenuDiscovery):
    """Discovery that counts scans and can be changed between builds."""

    def __init__(self, declarations):
        self.declarations = list(declarations)
        self.calls = 0

    def discover(self):
        self.calls += 1
        return list(self.declarations)


class TestBuildScenarios:
    """The basic tree shapes."""

    @pytest.mark.unit
    def test_root_with_one_child(self):
        builder = MenuTreeBuilder(make_registry(
            decl("A", route="/a"),
            decl("B", "A", route="/a/b"),
        ))
        tree = builder.build()
        assert shape(tree) == [("A", [("B", [])])]
        assert tree[0].route == "/a"
        assert tree[0].children[0].route == "/a/b"

    @pytest.mark.unit
    def test_dangling_parent_produces_no_node(self):
        builder = MenuTreeBuilder(make_registry(decl("A"), decl("C", "Z")))
        tree = builder.build()
        assert shape(tree) == [("A", [])]
        all_ids = [node.self_id for root in tree for node in root.walk()]
        assert "C" not in all_ids

    @pytest.mark.unit
    def test_sibling_order_follows_discovery_order(self):
        builder = MenuTreeBuilder(make_registry(decl("A"), decl("B"), decl("C")))
        assert [node.self_id for node in builder.build()] == ["A", "B", "C"]

    @pytest.mark.unit
    def test_empty_declarations_give_empty_tree(self):
        assert MenuTreeBuilder(make_registry()).build() == []

    @pytest.mark.unit
    def test_three_level_chain(self):
        builder = MenuTreeBuilder(make_registry(decl("A"), decl("B", "A"), decl("C", "B")))
        a, = builder.build()
        b, = a.children
        c, = b.children
        assert (a.self_id, b.self_id, c.self_id) == ("A", "B", "C")
        assert c.children == ()

    @pytest.mark.unit
    def test_children_declared_before_parent(self):
        builder = MenuTreeBuilder(make_registry(decl("B", "A"), decl("C", "A"), decl("A")))
        assert shape(builder.build()) == [("A", [("B", []), ("C", [])])]


class TestTreeProperties:
    """Properties that hold for any acyclic declaration set."""

    @pytest.mark.unit
    def test_roots_only_at_top_level(self, team_declarations):
        tree = MenuTreeBuilder(make_registry(*team_declarations)).build()
        root_ids = {d.self_id for d in team_declarations if d.parent_id is None}
        assert {node.self_id for node in tree} == root_ids
        nested = [n.self_id for root in tree for child in root.children for n in child.walk()]
        assert not root_ids & set(nested)

    @pytest.mark.unit
    def test_each_node_sits_under_its_parent(self, team_declarations):
        tree = MenuTreeBuilder(make_registry(*team_declarations)).build()
        for root in tree:
            for node in root.walk():
                for child in node.children:
                    assert child.parent_id == node.self_id

    @pytest.mark.unit
    def test_fields_copied_from_declaration(self, team_declarations):
        tree = MenuTreeBuilder(make_registry(*team_declarations)).build()
        team = tree[1]
        assert team.label == "team"
        assert team.route == "/team"
        assert team.icon == "bi bi-people"
        assert team.parent_id is None
        assert team.children[0].parent_id == "team"

    @pytest.mark.unit
    def test_build_twice_gives_identical_trees(self, team_declarations):
        builder = MenuTreeBuilder(make_registry(*team_declarations))
        assert builder.build() == builder.build()

    @pytest.mark.unit
    def test_nodes_are_immutable(self):
        node, = MenuTreeBuilder(make_registry(decl("A"))).build()
        with pytest.raises(AttributeError):
            node.label = "changed"
        assert isinstance(node.children, tuple)

    @pytest.mark.unit
    def test_build_rescans_each_call(self):
        discovery = CountingDiscovery([decl("A")])
        builder = MenuTreeBuilder(discovery)
        assert shape(builder.build()) == [("A", [])]
        discovery.declarations.append(decl("B", "A"))
        assert shape(builder.build()) == [("A", [("B", [])])]
        assert discovery.calls == 2

    @pytest.mark.unit
    def test_menu_items_built_once(self):
        discovery = CountingDiscovery([decl("A")])
        builder = MenuTreeBuilder(discovery)
        first = builder.menu_items
        discovery.declarations.append(decl("B"))
        assert builder.menu_items is first
        assert discovery.calls == 1

    @pytest.mark.unit
    def test_class_identities(self):
        class Parent:
            pass

        class Child:
            pass

        builder = MenuTreeBuilder(make_registry(
            decl(Parent, route="/parent"),
            decl(Child, Parent, route="/child"),
        ))
        parent, = builder.build()
        assert parent.self_id is Parent
        assert parent.children[0].self_id is Child


class TestDuplicates:
    """Declarations sharing a self_id."""

    @pytest.mark.unit
    def test_first_declaration_wins(self, caplog):
        builder = MenuTreeBuilder(make_registry(
            decl("A", route="/first"),
            decl("A", route="/second"),
            decl("B", "A"),
        ))
        with caplog.at_level(logging.WARNING):
            tree = builder.build()
        assert shape(tree) == [("A", [("B", [])])]
        assert tree[0].route == "/first"
        assert "Duplicate menu identity" in caplog.text

    @pytest.mark.unit
    def test_strict_mode_raises(self):
        builder = MenuTreeBuilder(
            make_registry(decl("A", route="/first"), decl("A", route="/second")),
            strict=True,
        )
        with pytest.raises(DuplicateIdentity) as exc_info:
            builder.build()
        assert exc_info.value.identity == "A"
        assert exc_info.value.routes == ["/first", "/second"]


class TestCycles:
    """Parent chains that loop back on themselves."""

    @pytest.mark.unit
    def test_cycle_members_are_dropped(self, caplog):
        builder = MenuTreeBuilder(make_registry(
            decl("root"),
            decl("A", "B"),
            decl("B", "A"),
            decl("C", "A"),
        ))
        with caplog.at_level(logging.WARNING):
            tree = builder.build()
        assert shape(tree) == [("root", [])]
        assert "Cyclic menu parents" in caplog.text

    @pytest.mark.unit
    def test_self_reference_is_a_cycle(self):
        builder = MenuTreeBuilder(make_registry(decl("A", "A")), strict=True)
        with pytest.raises(CyclicReference) as exc_info:
            builder.build()
        assert exc_info.value.cycle == ["A", "A"]

    @pytest.mark.unit
    def test_strict_mode_reports_the_cycle(self):
        builder = MenuTreeBuilder(
            make_registry(decl("root"), decl("A", "C"), decl("B", "A"), decl("C", "B")),
            strict=True,
        )
        with pytest.raises(CyclicReference) as exc_info:
            builder.build()
        assert exc_info.value.cycle == ["A", "C", "B", "A"]

    @pytest.mark.unit
    def test_chain_into_cycle_is_not_a_cycle_itself(self):
        builder = MenuTreeBuilder(
            make_registry(decl("A", "B"), decl("B", "A"), decl("tail", "A")),
        )
        cycles = builder._find_cycles({d.self_id: d for d in builder.discovery.discover()})
        assert len(cycles) == 1
        assert set(cycles[0]) == {"A", "B"}


class TestUnreachable:
    """Diagnostics for declarations missing from the tree."""

    @pytest.mark.unit
    def test_lists_dangling_and_descendants(self):
        builder = MenuTreeBuilder(make_registry(
            decl("A"),
            decl("orphan", "missing"),
            decl("orphan-child", "orphan"),
        ))
        assert [d.self_id for d in builder.unreachable()] == ["orphan", "orphan-child"]

    @pytest.mark.unit
    def test_complete_tree_has_nothing_unreachable(self, team_declarations):
        assert MenuTreeBuilder(make_registry(*team_declarations)).unreachable() == []


class TestDeepChains:
    """Parent chains deeper than the interpreter's recursion limit."""

    DEPTH = 3000

    @pytest.fixture
    def chain_builder(self):
        declarations = [decl(0)] + [decl(i, i - 1) for i in range(1, self.DEPTH)]
        return MenuTreeBuilder(make_registry(*declarations))

    @pytest.mark.unit
    def test_build_deep_chain(self, chain_builder):
        tree = chain_builder.build()
        assert len(tree) == 1
        node, depth = tree[0], 1
        while node.children:
            assert len(node.children) == 1
            assert node.children[0].parent_id == node.self_id
            node, depth = node.children[0], depth + 1
        assert depth == self.DEPTH
        assert node.self_id == self.DEPTH - 1

    @pytest.mark.unit
    def test_walk_deep_chain_in_order(self, chain_builder):
        root, = chain_builder.build()
        assert [node.self_id for node in root.walk()] == list(range(self.DEPTH))
        assert chain_builder.unreachable() == []

    @pytest.mark.unit
    def test_to_dict_deep_chain(self, chain_builder):
        root, = chain_builder.build()
        data, depth = root.to_dict(), 1
        while data["children"]:
            data, depth = data["children"][0], depth + 1
        assert depth == self.DEPTH
        assert data["id"] == str(self.DEPTH - 1)
        assert data["parent"] == str(self.DEPTH - 2)

    @pytest.mark.unit
    def test_walk_keeps_preorder_with_siblings(self, team_declarations):
        tree = MenuTreeBuilder(make_registry(*team_declarations)).build()
        assert [node.self_id for node in tree[1].walk()] == [
            "team", "team-1", "team-1-a", "team-1-a-x", "team-2", "team-2-a",
        ]
