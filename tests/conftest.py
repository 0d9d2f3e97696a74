"""Pytest configuration and shared fixtures for orthopath tests."""

import pytest

from orthopath import ConnectionRouter, Rectangle, ShortestPathRouter


@pytest.fixture
def router():
    """Default ShortestPathRouter instance."""
    return ShortestPathRouter()


@pytest.fixture
def traced_router():
    """ShortestPathRouter with tracing enabled."""
    return ShortestPathRouter(trace=True)


@pytest.fixture
def square():
    """A 50x50 obstacle at (10, 10)."""
    return Rectangle(10, 10, 50, 50)


@pytest.fixture
def detour_router(router, square):
    """Router with one obstacle blocking a horizontal path, already solved."""
    router.add_obstacle(square)
    handle = router.add_path((0, 30), (100, 30), data="detour")
    router.solve()
    return router, handle


@pytest.fixture
def zigzag_obstacles():
    """Three tall obstacles forming a corridor that zig-zags under, over, under."""
    return [
        Rectangle(50, -1000, 50, 1150),
        Rectangle(175, 60, 50, 1000),
        Rectangle(300, -1000, 50, 1150),
    ]


@pytest.fixture
def connection_router():
    """ConnectionRouter with two figures, target down and to the right."""
    connections = ConnectionRouter()
    connections.add_figure("a", (0, 0, 80, 40))
    connections.add_figure("b", (200, 100, 80, 40))
    return connections
