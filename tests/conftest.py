"""
Shared pytest fixtures for robyn_menu tests.
"""

import os
import sys
import pytest

# Add project root to path so the examples package is importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from robyn_menu.core.discovery import MenuRegistry
from robyn_menu.core.menu import MenuDeclaration


class FakeApp:
    """Records routes the way Robyn's decorators register them."""

    def __init__(self):
        self.routes = {}

    def get(self, route):
        def decorator(handler):
            self.routes[route] = handler
            return handler
        return decorator


def decl(self_id, parent_id=None, route=None, label=None, icon=""):
    return MenuDeclaration(
        route=route or f"/{self_id}",
        label=label or str(self_id),
        self_id=self_id,
        parent_id=parent_id,
        icon=icon,
    )


def make_registry(*declarations):
    registry = MenuRegistry()
    for declaration in declarations:
        registry.register(declaration)
    return registry


def shape(nodes):
    """Reduce a tree to nested (id, children) tuples for easy comparison."""
    return [(node.self_id, shape(node.children)) for node in nodes]


@pytest.fixture
def fake_app():
    return FakeApp()


@pytest.fixture
def team_declarations():
    """Two roots, one of them with a three level subtree."""
    return [
        decl("home"),
        decl("team", icon="bi bi-people"),
        decl("team-1", "team"),
        decl("team-2", "team"),
        decl("team-1-a", "team-1"),
        decl("team-1-a-x", "team-1-a"),
        decl("team-2-a", "team-2"),
    ]
