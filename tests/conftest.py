import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from toptw.classes.TOPTWProblem import TOPTWInstance


def instance_text(vehicles, depot, customers):
    """
    depot: (x, y, ready_time, due_time)
    customers: list of (x, y, service_time, score, ready_time, due_time)
    """
    x, y, ready, due = depot
    lines = [f"1 {vehicles} {len(customers)} 100", "0 0"]
    lines.append(f"0 {x} {y} 0 0 0 0 {ready} {due}")
    for i, (cx, cy, service, score, c_ready, c_due) in enumerate(customers, 1):
        lines.append(f"{i} {cx} {cy} {service} {score} 1 1 1 {c_ready} {c_due}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_instance():
    def _make(vehicles, depot, customers):
        return TOPTWInstance(data=instance_text(vehicles, depot, customers))
    return _make


@pytest.fixture
def two_customer_instance(make_instance):
    # customer 1 closes early, so 0-1-2-0 is the only feasible order
    return make_instance(1, (0, 0, 0, 1000), [
        (10, 0, 0, 10, 0, 15),
        (20, 5, 0, 20, 0, 1000),
    ])


@pytest.fixture
def late_customer_instance(make_instance):
    # customer 1 cannot be served and be back at the depot before 100
    return make_instance(2, (0, 0, 0, 100), [
        (10, 0, 5, 30, 95, 100),
        (5, 0, 0, 10, 0, 100),
    ])


@pytest.fixture
def instance_file_text():
    return instance_text(2, (35, 35, 0, 230), [
        (41, 49, 10, 10, 0, 204),
        (35, 17, 10, 7, 0, 202),
        (55, 45, 10, 13, 0, 197),
        (55, 20, 10, 19, 149, 159),
    ])


@pytest.fixture
def random_instance(make_instance):
    rng = np.random.RandomState(7)
    customers = []
    for _ in range(25):
        x, y = rng.randint(0, 100, size=2)
        ready = rng.randint(0, 150)
        width = rng.randint(20, 120)
        customers.append((x, y, rng.randint(0, 10), rng.randint(1, 30), ready, ready + width))
    return make_instance(3, (50, 50, 0, 300), customers)
