import math

import numpy as np
import pytest

from toptw.classes.TOPTWProblem import InstanceFormatError, NodeKind, TOPTWInstance


def test_parse_data_reads_header_and_nodes(instance_file_text):
    instance = TOPTWInstance(data=instance_file_text)

    assert instance.vehicles == 2
    assert instance.max_routes == 2
    assert instance.n_pois == 4
    assert len(instance.nodes) == 5
    assert instance.filename == "from_data"

    depot = instance.nodes[0]
    assert depot.kind is NodeKind.DEPOT
    assert (depot.x, depot.y) == (35.0, 35.0)
    assert (depot.ready_time, depot.due_time) == (0.0, 230.0)
    assert depot.score == 0.0

    customer = instance.nodes[4]
    assert customer.kind is NodeKind.CUSTOMER
    assert (customer.x, customer.y) == (55.0, 20.0)
    assert customer.service_time == 10.0
    assert customer.score == 19.0
    assert (customer.ready_time, customer.due_time) == (149.0, 159.0)


def test_max_time_per_route_is_depot_due_time(instance_file_text):
    instance = TOPTWInstance(data=instance_file_text)
    assert instance.max_time_per_route == 230.0


def test_distance_matrix_is_symmetric_euclidean(instance_file_text):
    instance = TOPTWInstance(data=instance_file_text)
    d = instance.distances

    assert d.shape == (5, 5)
    assert np.allclose(d, d.T)
    assert np.all(np.diag(d) == 0.0)
    assert instance.get_distance(0, 1) == pytest.approx(math.hypot(41 - 35, 49 - 35))


def test_load_from_file_and_folder(tmp_path, instance_file_text):
    path = tmp_path / "c101.txt"
    path.write_text(instance_file_text)

    from_file = TOPTWInstance(filename=str(path))
    from_folder = TOPTWInstance(filename="c101.txt", data=str(tmp_path))

    assert from_file.filename == "c101.txt"
    assert from_folder.n_pois == from_file.n_pois == 4
    assert np.allclose(from_file.distances, from_folder.distances)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        TOPTWInstance(filename=str(tmp_path / "nope.txt"))


def test_no_source_raises():
    with pytest.raises(ValueError):
        TOPTWInstance()


@pytest.mark.parametrize("broken", [
    "1\n0 0\n0 0 0 0 0 0 0 0 100\n",                      # header without node count
    "1 1 1\n0 0\n0 0 0 0 0 0 0 0 100\n",                   # customer line missing
    "1 1 1\n0 0\n0 0 0 0 0 0 0 0 100\n1 5 5 0 10 0 0\n",   # customer line too short
    "1 1 1\n0 0\n0 0 0 0 0 0 0 0 100\n1 a 5 0 10 0 0 0 0 50\n",  # non numeric coordinate
    "1 1 1\n0 0\n0 0 0 0 0 0 0 0 100\n1 5 5 0 10 0 0 0 60 50\n",  # ready after due
])
def test_malformed_data_raises_format_error(broken):
    with pytest.raises(InstanceFormatError):
        TOPTWInstance(data=broken)


def test_malformed_file_error_names_the_file(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("1 x 2\n")
    with pytest.raises(InstanceFormatError, match="bad.txt"):
        TOPTWInstance(filename=str(path))


def test_add_node_extends_distances(make_instance):
    instance = make_instance(1, (0, 0, 0, 100), [(3, 4, 0, 5, 0, 100)])
    new_id = instance.add_node(6, 8, score=7, ready_time=0, due_time=50)

    assert new_id == 2
    assert instance.n_pois == 2
    assert instance.distances.shape == (3, 3)
    assert instance.get_distance(0, 2) == pytest.approx(10.0)
    assert instance.get_distance(2, 1) == pytest.approx(5.0)
    assert instance.customers() == [1, 2]


def test_add_node_rejects_inverted_window(make_instance):
    instance = make_instance(1, (0, 0, 0, 100), [(3, 4, 0, 5, 0, 100)])
    with pytest.raises(ValueError):
        instance.add_node(1, 1, score=1, ready_time=20, due_time=10)


def test_add_node_depot_copies_depot(make_instance):
    instance = make_instance(2, (1, 2, 0, 100), [(4, 6, 0, 5, 0, 100)])
    depot_id = instance.add_node_depot()

    assert depot_id == 2
    assert instance.is_depot(depot_id)
    assert instance.depots == 1
    assert instance.depot_ids() == [0, 2]
    assert instance.customers() == [1]
    assert instance.nodes[depot_id].due_time == 100
    assert instance.get_distance(depot_id, 0) == 0.0
    assert instance.get_distance(depot_id, 1) == pytest.approx(instance.get_distance(0, 1))


def test_route_distance_and_max_score(instance_file_text):
    instance = TOPTWInstance(data=instance_file_text)
    route = [0, 1, 3, 0]
    expected = instance.get_distance(0, 1) + instance.get_distance(1, 3) + instance.get_distance(3, 0)

    assert instance.get_route_distance(route) == pytest.approx(expected)
    assert instance.get_max_score() == 19.0


def test_str_lists_every_node(instance_file_text):
    text = str(TOPTWInstance(data=instance_file_text))
    assert text.startswith("Nodes: 4")
    assert "CUST NO." in text
    assert "Vehicles: 2" in text
