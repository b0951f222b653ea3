"""
Tests for TreeTraverser.
"""

import threading

import pytest

from armforge.core.construct import Construct
from armforge.core.stack import ResourceGroupStack
from armforge.exceptions import TreeCycleError
from armforge.resources.network import NetworkSecurityGroup
from armforge.synthesis.traverser import TreeTraverser, traverse


class TestTraverse:
    """Test cases for TreeTraverser.traverse."""

    def test_pre_order_with_insertion_order(self, app):
        """Test depth-first pre-order, siblings in insertion order."""
        b = Construct(app, "B")
        b1 = Construct(b, "B1")
        a = Construct(app, "A")

        result = traverse(app)

        assert result.constructs == [app, b, b1, a]
        assert result.constructs_by_path["B/B1"] is b1

    def test_discovers_stacks(self, subscription_stack, rg_stack):
        """Test that every STACK-role construct is reported by path."""
        result = traverse(subscription_stack.node.root)

        assert list(result.stacks) == ["Foundation", "Foundation/Network"]
        assert result.stacks["Foundation/Network"] is rg_stack

    def test_cycle_detected(self, app):
        """Test that a construct reachable from itself aborts traversal."""
        a = Construct(app, "A")
        b = Construct(a, "B")
        # Only a corrupted tree can contain a cycle.
        b.node._children.append(a)

        with pytest.raises(TreeCycleError) as exc_info:
            TreeTraverser().traverse(app)

        assert exc_info.value.path == "A"
        assert exc_info.value.cycle == ["", "A", "A/B", "A"]

    def test_shared_child_detected(self, app):
        """Test that a construct listed under two parents is rejected."""
        a = Construct(app, "A")
        b = Construct(app, "B")
        shared = Construct(a, "Shared")
        b.node._children.append(shared)

        with pytest.raises(TreeCycleError):
            traverse(app)

    def test_state_is_per_call(self, app):
        """Test that a traverser can be reused and shared across threads."""
        for index in range(20):
            Construct(app, f"C{index}")
        traverser = TreeTraverser()
        results = []

        def run():
            results.append(len(traverser.traverse(app).constructs))

        threads = [threading.Thread(target=run) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == [21] * 8
        assert len(traverser.traverse(app).constructs) == 21

    def test_deep_tree(self, app):
        """Test that deep trees do not hit the recursion limit."""
        current = app
        for depth in range(3000):
            current = Construct(current, f"L{depth}")

        assert len(traverse(app).constructs) == 3001


class TestQueries:
    """Test cases for find_stack and get_descendants."""

    def test_find_stack(self, rg_stack):
        nsg = NetworkSecurityGroup(rg_stack, "Web")

        assert TreeTraverser.find_stack(nsg) is rg_stack
        assert TreeTraverser.find_stack(rg_stack) is rg_stack

    def test_find_stack_none(self, app):
        assert TreeTraverser.find_stack(Construct(app, "Loose")) is None

    def test_get_descendants_strict(self, subscription_stack):
        """Test that descendants exclude the construct itself."""
        child = ResourceGroupStack(subscription_stack, "Data")
        leaf = Construct(child, "Leaf")

        assert TreeTraverser.get_descendants(subscription_stack) == [child, leaf]
