import sys
from pathlib import Path

import pytest

# Keep imports predictable in local runs
sys.path.append(str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from main import app
from modules.isochrone.services import build_services
from modules.road_graph import RoadGraph
from router.utils.deps import get_isochrone_services

CENTER_LAT = 48.1
CENTER_LON = 11.5
GRID_SIZE = 25
LAT_STEP = 0.0045
LON_STEP = 0.0067
EDGE_LENGTH_M = 500.0  # 60s per edge for a car on a residential road


def make_grid_graph(size: int = GRID_SIZE, road_class: str = "residential") -> RoadGraph:
    """Square grid centred on (48.1, 11.5), node id = row * size + col."""
    half = size // 2
    nodes = []
    for row in range(size):
        for col in range(size):
            nodes.append(
                {
                    "id": row * size + col,
                    "lat": CENTER_LAT + (row - half) * LAT_STEP,
                    "lon": CENTER_LON + (col - half) * LON_STEP,
                }
            )

    edges = []
    for row in range(size):
        for col in range(size):
            node_id = row * size + col
            if col + 1 < size:
                edges.append({"id": len(edges), "base": node_id, "adj": node_id + 1,
                              "distance": EDGE_LENGTH_M, "road_class": road_class})
            if row + 1 < size:
                edges.append({"id": len(edges), "base": node_id, "adj": node_id + size,
                              "distance": EDGE_LENGTH_M, "road_class": road_class})
    return RoadGraph.from_dict({"nodes": nodes, "edges": edges})


@pytest.fixture(scope="session")
def grid_graph():
    return make_grid_graph()


@pytest.fixture(scope="session")
def center_node():
    half = GRID_SIZE // 2
    return half * GRID_SIZE + half


@pytest.fixture(scope="session")
def services(grid_graph):
    return build_services(
        grid_graph,
        max_visited_nodes=1_000_000,
        copyrights=["GraphHopper", "OpenStreetMap contributors"],
    )


@pytest.fixture
def client(services):
    app.dependency_overrides[get_isochrone_services] = lambda: services
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
