#-*- coding: utf-8 -*-
"""
Created on Thur August 14 04:26:17 2025

Solution representation for the TOPTW GRASP construction.

Every route is a circular doubly linked list through its depot: the solution keeps
for each node its predecessor and successor (NO_INITIALIZED while the node is not
routed). Depot 0 opens the first route, every further vehicle starts at a
synthetic copy of the depot appended to the instance.


@author: Kreecha_P

MIT License

Copyright (c) 2025 Kreecha Puphaiboon

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

import logging
from typing import List, Dict, Tuple

from toptw.classes.TOPTWProblem import TOPTWInstance

logger = logging.getLogger(__name__)

NO_INITIALIZED = -1
NO_EVALUATED = -1.0


class TOPTWSolution:
    """Represents a solution to TOPTW as a set of circular linked routes"""

    def __init__(self, instance: TOPTWInstance):
        self.instance = instance
        self.init_solution()

    def init_solution(self):
        """Reset to a single open route on depot 0 with all other vehicles available"""
        size = len(self.instance.nodes)
        self.predecessors = [NO_INITIALIZED] * size
        self.successors = [NO_INITIALIZED] * size
        self.waiting_time = [float(NO_INITIALIZED)] * size
        self.position_in_route = [NO_INITIALIZED] * size

        self.routes = [NO_INITIALIZED] * self.instance.vehicles
        self.routes[0] = 0
        self.predecessors[0] = 0
        self.successors[0] = 0
        self.waiting_time[0] = 0.0
        self.position_in_route[0] = 0

        self.available_vehicles = self.instance.vehicles - 1
        self._objective_value = NO_EVALUATED

    def _grow(self):
        missing = len(self.instance.nodes) - len(self.predecessors)
        if missing > 0:
            self.predecessors.extend([NO_INITIALIZED] * missing)
            self.successors.extend([NO_INITIALIZED] * missing)
            self.waiting_time.extend([float(NO_INITIALIZED)] * missing)
            self.position_in_route.extend([NO_INITIALIZED] * missing)

    @property
    def created_routes(self) -> int:
        return self.instance.vehicles - self.available_vehicles

    def get_index_route(self, route_index: int) -> int:
        """Depot of the route at route_index"""
        return self.routes[route_index]

    def is_depot(self, node_id: int) -> bool:
        """True when node_id is the depot of an open route"""
        return node_id in self.routes[:self.created_routes]

    def is_placed(self, node_id: int) -> bool:
        return node_id < len(self.predecessors) and self.predecessors[node_id] != NO_INITIALIZED

    def get_predecessor(self, node_id: int) -> int:
        return self.predecessors[node_id]

    def get_successor(self, node_id: int) -> int:
        return self.successors[node_id]

    def set_predecessor(self, node_id: int, predecessor: int):
        self.predecessors[node_id] = predecessor

    def set_successor(self, node_id: int, successor: int):
        self.successors[node_id] = successor

    def get_position_in_route(self, node_id: int) -> int:
        return self.position_in_route[node_id]

    def get_waiting_time(self, node_id: int) -> float:
        return self.waiting_time[node_id]

    def set_waiting_time(self, node_id: int, waiting_time: float):
        self.waiting_time[node_id] = waiting_time

    def get_distance(self, i: int, j: int) -> float:
        return self.instance.get_distance(i, j)

    def add_route(self) -> int:
        """Open a new route on the next synthetic depot and return the depot id"""
        if self.available_vehicles <= 0:
            raise RuntimeError(f"Cannot open route {self.created_routes + 1}: "
                               f"all {self.instance.vehicles} vehicles are in use")

        route_pos = self.created_routes
        synthetic_depots = self.instance.depot_ids()[1:]
        if route_pos - 1 < len(synthetic_depots):
            depot = synthetic_depots[route_pos - 1]
        else:
            depot = self.instance.add_node_depot()
        self._grow()

        self.routes[route_pos] = depot
        self.available_vehicles -= 1
        self.predecessors[depot] = depot
        self.successors[depot] = depot
        self.waiting_time[depot] = 0.0
        self.position_in_route[depot] = 0

        logger.debug(f"Opened route {route_pos} on depot {depot}, {self.available_vehicles} vehicles left")
        return depot

    def insert_customer(self, customer: int, predecessor: int):
        """Splice customer right after predecessor, rewriting the four links together"""
        if self.instance.is_depot(customer):
            raise ValueError(f"Node {customer} is a depot and cannot be inserted as a customer")
        if self.is_placed(customer):
            raise ValueError(f"Customer {customer} is already routed")
        if not self.is_placed(predecessor):
            raise ValueError(f"Predecessor {predecessor} is not routed")

        successor = self.successors[predecessor]
        self.set_predecessor(customer, predecessor)
        self.set_successor(customer, successor)
        self.set_successor(predecessor, customer)
        self.set_predecessor(successor, customer)

        # Renumber the tail of the route
        position = self.position_in_route[predecessor] + 1
        node = customer
        while not self.instance.is_depot(node):
            self.position_in_route[node] = position
            position += 1
            node = self.successors[node]

        self._objective_value = NO_EVALUATED

    # =========== Feasibility and incremental cost ============= #
    def get_feasible_positions(self, customer: int, departure_times) -> List[Tuple[int, int, int]]:
        """
        Insertion slots that keep every time window and the route duration cap

        Args:
            customer: unrouted customer id
            departure_times: one row per open route, departure time indexed by node id

        Returns:
            (route_index, predecessor, position) for every feasible slot, position being
            the 1-based rank the customer would take in the route
        """
        positions = []
        for route_index in range(self.created_routes):
            depot = self.routes[route_index]
            departures = departure_times[route_index]
            pre = depot
            position = 1
            while True:
                suc = self.successors[pre]
                if self._is_insertion_feasible(customer, pre, suc, depot, departures):
                    positions.append((route_index, pre, position))
                if suc == depot:
                    break
                pre = suc
                position += 1
        return positions

    def _is_insertion_feasible(self, customer: int, pre: int, suc: int, depot: int, departures) -> bool:
        nodes = self.instance.nodes
        node_info = nodes[customer]

        arrival = max(node_info.ready_time, departures[pre] + self.get_distance(pre, customer))
        if arrival > node_info.due_time:
            return False
        current_time = arrival + node_info.service_time

        prev, current = customer, suc
        while True:
            node_info = nodes[current]
            arrival = max(node_info.ready_time, current_time + self.get_distance(prev, current))
            if current == depot:
                return arrival <= self.instance.max_time_per_route
            if arrival > node_info.due_time:
                return False
            current_time = arrival + node_info.service_time
            # No push forward: the rest of the route keeps its feasible schedule
            if current_time <= departures[current]:
                return True
            prev, current = current, self.successors[current]

    def evaluate_incremental_cost(self, customer: int, predecessor: int) -> float:
        """Distance added by inserting customer right after predecessor"""
        successor = self.successors[predecessor]
        return (self.get_distance(predecessor, customer)
                + self.get_distance(customer, successor)
                - self.get_distance(predecessor, successor))

    # =========== Evaluation ============= #
    def evaluate_fitness(self) -> float:
        """Sum the scores of all routed customers"""
        objective_function = 0.0
        for k in range(self.created_routes):
            depot = self.routes[k]
            pre = depot
            while True:
                suc = self.successors[pre]
                objective_function += self.instance.nodes[suc].score
                pre = suc
                if suc == depot:
                    break
        self._objective_value = objective_function
        return objective_function

    def objective(self) -> float:
        """Collected score, evaluated on demand"""
        if self._objective_value == NO_EVALUATED:
            return self.evaluate_fitness()
        return self._objective_value

    def get_routes(self) -> List[List[int]]:
        """Node sequence of every open route, depot first and last"""
        routes = []
        for k in range(self.created_routes):
            depot = self.routes[k]
            route = [depot]
            node = self.successors[depot]
            while node != depot:
                route.append(node)
                node = self.successors[node]
            route.append(depot)
            routes.append(route)
        return routes

    def get_routed_customers(self) -> List[int]:
        return [node for route in self.get_routes() for node in route[1:-1]]

    def get_route_schedule(self, route_index: int) -> List[Dict]:
        """Arrival, departure and waiting time of each stop, recomputed from time 0"""
        depot = self.routes[route_index]
        nodes = self.instance.nodes
        schedule = [{'node': depot, 'arrival': 0.0, 'departure': 0.0, 'waiting': 0.0}]

        current_time = 0.0
        pre = depot
        while True:
            suc = self.successors[pre]
            node_info = nodes[suc]
            reach = current_time + self.get_distance(pre, suc)
            arrival = max(reach, node_info.ready_time)
            departure = arrival + node_info.service_time
            schedule.append({'node': suc, 'arrival': arrival, 'departure': departure,
                             'waiting': arrival - reach})
            current_time = departure
            pre = suc
            if suc == depot:
                break
        return schedule

    def _is_route_feasible(self, route_index: int) -> bool:
        schedule = self.get_route_schedule(route_index)
        for stop in schedule[1:-1]:
            if stop['arrival'] > self.instance.nodes[stop['node']].due_time:
                return False
        return schedule[-1]['arrival'] <= self.instance.max_time_per_route

    def is_feasible(self) -> bool:
        """Check every route against time windows and the route duration cap"""
        return all(self._is_route_feasible(k) for k in range(self.created_routes))

    def get_total_time(self) -> float:
        return sum(self.get_route_schedule(k)[-1]['arrival'] for k in range(self.created_routes))

    def get_info_solution(self) -> str:
        """Human readable report of every route with its schedule"""
        column = 15
        headers = ["CUST NO.", "X COORD.", "Y. COORD.", "READY TIME",
                   "DUE DATE", "ARRIVE TIME", "LEAVE TIME", "SERVICE TIME"]
        nodes = self.instance.nodes

        text = (f"\nNODES: {self.instance.n_pois}\n"
                f"MAX TIME PER ROUTE: {self.instance.max_time_per_route}\n"
                f"MAX NUMBER OF ROUTES: {self.instance.max_routes}\n")
        text_solution = "\nSOLUTION: \n"
        cost_time_solution = 0.0
        fitness_score = 0.0

        for k in range(self.created_routes):
            schedule = self.get_route_schedule(k)
            text += f"\nROUTE {k}\n"
            text += "".join(f"{h:>{column}}" for h in headers) + "\n"
            for stop in schedule:
                node_info = nodes[stop['node']]
                values = [node_info.x, node_info.y, node_info.ready_time, node_info.due_time,
                          stop['arrival'], stop['departure'], node_info.service_time]
                text += f"{stop['node']:>{column}}" + "".join(f"{v:>{column}.3f}" for v in values) + "\n"
                if stop is not schedule[0] and stop is not schedule[-1]:
                    fitness_score += node_info.score

            text_solution += " - ".join(str(stop['node']) for stop in schedule) + "\n"
            cost_time_solution += schedule[-1]['arrival']

        text_solution += (f"FEASIBLE SOLUTION: {self.is_feasible()}\n"
                          f"SCORE: {fitness_score}\n"
                          f"TIME COST: {cost_time_solution}\n")
        return text_solution + text

    def print_solution(self) -> float:
        """Print each route as a node sequence followed by the score"""
        for route in self.get_routes():
            print(" - ".join(str(node) for node in route))
        fitness = self.evaluate_fitness()
        print(f"SC={fitness}")
        return fitness

    def copy(self):
        """Create a deep copy of the solution"""
        new_solution = TOPTWSolution(self.instance)
        new_solution.predecessors = self.predecessors[:]
        new_solution.successors = self.successors[:]
        new_solution.waiting_time = self.waiting_time[:]
        new_solution.position_in_route = self.position_in_route[:]
        new_solution.routes = self.routes[:]
        new_solution.available_vehicles = self.available_vehicles
        new_solution._objective_value = self._objective_value
        return new_solution

    def __eq__(self, other):
        if not isinstance(other, TOPTWSolution):
            return NotImplemented
        return self.predecessors == other.predecessors

    __hash__ = None


def check_unique_placement(solution: TOPTWSolution) -> bool:
    """Check that no node is routed twice and that every link has its inverse."""
    seen = set()
    ok = True
    for route_idx, route in enumerate(solution.get_routes()):
        for node in route[1:-1]:
            if node in seen:
                logger.warning(f"Node check failed: node {node} appears twice (route {route_idx})")
                ok = False
            seen.add(node)

    for node in range(len(solution.successors)):
        if not solution.is_placed(node):
            continue
        if solution.get_predecessor(solution.get_successor(node)) != node:
            logger.warning(f"Link check failed: predecessor of successor of {node} is not {node}")
            ok = False

    placed = {n for n in range(len(solution.successors))
              if solution.is_placed(n) and not solution.instance.is_depot(n)}
    if placed != seen:
        logger.warning(f"Node check failed: linked but unreachable nodes {placed - seen}")
        ok = False
    return ok


def detailed_feasibility_check(solution: TOPTWSolution) -> dict:
    """
    Comprehensive feasibility check that explains all constraint violations
    Returns a dictionary with detailed violation information
    """
    violations = {
        'is_feasible': True,
        'time_window_violations': [],
        'route_duration_violations': [],
        'route_structure_violations': [],
        'total_violations': 0
    }
    instance = solution.instance

    for route_idx in range(solution.created_routes):
        schedule = solution.get_route_schedule(route_idx)
        route = [stop['node'] for stop in schedule]
        logger.debug(f"Route {route_idx}: {route}")

        if route[0] != route[-1] or not instance.is_depot(route[0]):
            violation = f"Route {route_idx} doesn't start/end with its depot: {route}"
            violations['route_structure_violations'].append(violation)
            violations['is_feasible'] = False

        for stop in schedule[1:-1]:
            node_info = instance.nodes[stop['node']]
            if stop['waiting'] > 0:
                logger.debug(f"  WAIT Node {stop['node']}: waiting {stop['waiting']:.1f}, "
                             f"ready at {node_info.ready_time}")
            if stop['arrival'] > node_info.due_time:
                violation = (f"Route {route_idx}, Node {stop['node']}: Late arrival at {stop['arrival']:.1f}, "
                             f"due by {node_info.due_time}, "
                             f"violation: {stop['arrival'] - node_info.due_time:.1f}")
                violations['time_window_violations'].append(violation)
                violations['is_feasible'] = False

        route_time = schedule[-1]['arrival']
        if route_time > instance.max_time_per_route:
            violation = (f"Route {route_idx}: duration {route_time:.1f} exceeds "
                         f"{instance.max_time_per_route}")
            violations['route_duration_violations'].append(violation)
            violations['is_feasible'] = False

    violations['total_violations'] = (len(violations['time_window_violations']) +
                                      len(violations['route_duration_violations']) +
                                      len(violations['route_structure_violations']))

    for category, violation_list in violations.items():
        if isinstance(violation_list, list):
            for violation in violation_list:
                logger.warning(f"{category.upper().replace('_', ' ')}: {violation}")
    return violations
