import pytest
from fastapi.testclient import TestClient
from shapely.geometry import Polygon

from main import app
from modules.isochrone.services import build_services
from router.utils.deps import get_isochrone_services

from conftest import make_grid_graph

POINT = "48.1,11.5"


def test_polygon_scenario_three_buckets(client):
    resp = client.get("/isochrone", params={"point": POINT, "buckets": 3, "result": "polygon"})
    assert resp.status_code == 200
    data = resp.json()

    polygons = data["polygons"]
    assert len(polygons) == 3
    assert [f["properties"]["bucket"] for f in polygons] == [0, 1, 2]

    for feature in polygons:
        assert feature["type"] == "Feature"
        assert feature["geometry"]["type"] == "Polygon"
        ring = feature["geometry"]["coordinates"][0]
        assert len(ring) >= 2
        assert ring[0] == ring[-1]

    assert data["info"]["copyrights"] == ["GraphHopper", "OpenStreetMap contributors"]
    assert isinstance(data["info"]["took"], int)
    assert "x-took" in resp.headers
    assert int(resp.headers["x-took"]) >= 0


def test_polygon_rings_grow_with_bucket(client):
    resp = client.get("/isochrone", params={"point": POINT, "buckets": 3})
    assert resp.status_code == 200
    areas = [Polygon(f["geometry"]["coordinates"][0]).area for f in resp.json()["polygons"]]
    assert areas[0] < areas[1] < areas[2]


def test_polygon_default_is_single_bucket(client):
    resp = client.get("/isochrone", params={"point": POINT})
    assert resp.status_code == 200
    polygons = resp.json()["polygons"]
    assert len(polygons) == 1
    assert polygons[0]["properties"]["bucket"] == 0


def test_pointlist_default_columns(client):
    resp = client.get("/isochrone", params={"point": POINT, "result": "pointlist"})
    assert resp.status_code == 200
    data = resp.json()

    assert data["header"] == ["longitude", "latitude", "time", "distance"]
    assert len(data["items"]) > 0
    for row in data["items"]:
        assert len(row) == 4

    origin = data["items"][0]
    assert origin[0] == 11.5
    assert origin[1] == 48.1
    assert origin[2] == 0
    assert origin[3] == 0
    assert "info" in data


def test_pointlist_extended_header_scenario(client):
    resp = client.get(
        "/isochrone",
        params={"point": POINT, "result": "pointlist", "pointlist_ext_header": "node_id,edge_id"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["header"] == ["longitude", "latitude", "time", "distance", "node_id", "edge_id"]
    assert "prev_node_id" not in data["header"]
    for row in data["items"]:
        assert len(row) == 6


def test_pointlist_prev_columns_null_for_origin(client, center_node):
    resp = client.get(
        "/isochrone",
        params={
            "point": POINT,
            "result": "POINTLIST",
            "pointlist_ext_header": "node_id,prev_node_id,prev_longitude,prev_latitude,node_id",
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["header"] == [
        "longitude", "latitude", "time", "distance",
        "node_id", "prev_node_id", "prev_longitude", "prev_latitude",
    ]
    origin = data["items"][0]
    assert origin[4] == center_node
    assert origin[5:] == [None, None, None]
    for row in data["items"][1:]:
        assert row[5] is not None
        assert row[6] is not None and row[7] is not None


def test_unknown_column_fails_without_rows(client):
    resp = client.get(
        "/isochrone",
        params={"point": POINT, "result": "pointlist", "pointlist_ext_header": "node_id,speed"},
    )
    assert resp.status_code == 400
    data = resp.json()
    assert data["status"] == "error"
    assert "speed" in data["message"]
    assert "items" not in data


def test_distance_limit_overrides_time_limit(client):
    resp = client.get(
        "/isochrone",
        params={"point": POINT, "result": "pointlist", "time_limit": 1, "distance_limit": 1000},
    )
    assert resp.status_code == 200
    items = resp.json()["items"]
    # origin plus nodes up to two 500m edges away
    assert len(items) == 13
    assert max(row[3] for row in items) <= 1000


def test_time_limit_used_when_distance_unset(client):
    resp = client.get("/isochrone", params={"point": POINT, "result": "pointlist", "time_limit": 60})
    assert resp.status_code == 200
    items = resp.json()["items"]
    assert len(items) == 5
    assert max(row[2] for row in items) == 60000


def test_bucket_count_out_of_range(client):
    for buckets in (0, 21, -3):
        resp = client.get("/isochrone", params={"point": POINT, "buckets": buckets})
        assert resp.status_code == 400
        assert "bucket count out of range" in resp.json()["message"]


def test_missing_point(client):
    resp = client.get("/isochrone")
    assert resp.status_code == 400
    assert "missing point" in resp.json()["message"]


def test_malformed_point(client):
    resp = client.get("/isochrone", params={"point": "48.1"})
    assert resp.status_code == 400
    assert "invalid point" in resp.json()["message"]


def test_unsupported_vehicle(client):
    resp = client.get("/isochrone", params={"point": POINT, "vehicle": "hovercraft"})
    assert resp.status_code == 400
    assert "unsupported vehicle" in resp.json()["message"]


def test_unsupported_result_type(client):
    resp = client.get("/isochrone", params={"point": POINT, "result": "geojson"})
    assert resp.status_code == 400
    assert "unsupported result type" in resp.json()["message"]


def test_unsupported_weighting_hint(client):
    resp = client.get("/isochrone", params={"point": POINT, "weighting": "scenic"})
    assert resp.status_code == 400
    assert "weighting not supported" in resp.json()["message"]


def test_non_integer_buckets_is_validation_error(client):
    resp = client.get("/isochrone", params={"point": POINT, "buckets": "many"})
    assert resp.status_code == 422
    assert resp.json()["status"] == "error"


def test_sentinel_bucket_empty_fails_request(client):
    # the farthest grid corner is 1440s away, nothing is left past the limit
    resp = client.get("/isochrone", params={"point": POINT, "buckets": 2, "time_limit": 1500})
    assert resp.status_code == 400
    data = resp.json()
    assert "Too few points found for bucket 2" in data["message"]
    assert data["detail"]["bucket"] == 2
    assert "polygons" not in data


def test_point_not_found_for_vehicle_without_roads():
    graph = make_grid_graph(size=3, road_class="footway")
    services = build_services(graph, max_visited_nodes=1_000_000, copyrights=[])
    app.dependency_overrides[get_isochrone_services] = lambda: services
    try:
        resp = TestClient(app).get("/isochrone", params={"point": POINT, "vehicle": "car"})
        assert resp.status_code == 400
        assert "Point not found" in resp.json()["message"]

        resp = TestClient(app).get(
            "/isochrone", params={"point": POINT, "vehicle": "foot", "result": "pointlist"}
        )
        assert resp.status_code == 200
    finally:
        app.dependency_overrides.clear()


def test_search_too_expensive(grid_graph):
    services = build_services(grid_graph, max_visited_nodes=100, copyrights=[])
    app.dependency_overrides[get_isochrone_services] = lambda: services
    try:
        client = TestClient(app)
        resp = client.get("/isochrone", params={"point": POINT, "buckets": 2})
        assert resp.status_code == 400
        data = resp.json()
        assert "too many junction nodes" in data["message"]
        assert data["detail"]["max_allowed"] == 20

        # point lists are not guarded
        resp = client.get("/isochrone", params={"point": POINT, "result": "pointlist"})
        assert resp.status_code == 200
    finally:
        app.dependency_overrides.clear()


def test_health_reports_graph(client, grid_graph):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["graph"]["nodes"] == grid_graph.node_count
    assert data["graph"]["edges"] == grid_graph.edge_count
    assert "car" in data["vehicles"]


def test_far_away_point_is_not_found(client):
    resp = client.get("/isochrone", params={"point": "35.68,139.76", "result": "pointlist"})
    assert resp.status_code == 400
    data = resp.json()
    assert "Point not found" in data["message"]
    assert "items" not in data


@pytest.mark.parametrize("distance_limit", ["nan", "inf", "-inf"])
def test_non_finite_distance_limit(client, distance_limit):
    resp = client.get(
        "/isochrone",
        params={"point": POINT, "time_limit": -5, "distance_limit": distance_limit},
    )
    assert resp.status_code == 400
    data = resp.json()
    assert data["status"] == "error"
    assert "distance limit must be finite" in data["message"]


def test_health_without_network(services):
    bare = services.model_copy(update={"network": None})
    app.dependency_overrides[get_isochrone_services] = lambda: bare
    try:
        resp = TestClient(app).get("/health")
        assert resp.status_code == 200
        assert resp.json()["graph"] == {"nodes": 0, "edges": 0}
    finally:
        app.dependency_overrides.clear()


def test_shipped_graph_answers_default_queries():
    # runs the lifespan, which loads data/graph.json
    with TestClient(app) as client:
        resp = client.get("/health")
        assert resp.json()["graph"]["nodes"] > 0

        resp = client.get("/isochrone", params={"point": POINT})
        assert resp.status_code == 200
        assert len(resp.json()["polygons"]) == 1

        resp = client.get("/isochrone", params={"point": POINT, "buckets": 3})
        assert resp.status_code == 200
        assert [f["properties"]["bucket"] for f in resp.json()["polygons"]] == [0, 1, 2]

        resp = client.get("/isochrone", params={"point": POINT, "result": "pointlist"})
        assert resp.status_code == 200
        assert resp.json()["items"][0][:2] == [11.5, 48.1]
