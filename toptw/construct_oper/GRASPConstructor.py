#-*- coding: utf-8 -*-
"""
Created on Thur August 14 04:26:17 2025

Greedy randomized construction for TOPTW.

Each step evaluates every (unrouted customer, feasible slot) pair, keeps the
cheapest ones in a Restricted Candidate List (RCL) and picks one through a fuzzy
alpha cut on the membership 1 - cost / max score. When nothing fits a new
vehicle is opened, and the construction ends once the fleet is exhausted.


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
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
from alns.stop import MaxIterations

from toptw.classes.TOPTWSolution import TOPTWSolution

logger = logging.getLogger(__name__)

DEFAULT_ALPHA = 0.8


@dataclass(frozen=True)
class Candidate:
    customer: int
    route_index: int
    predecessor: int
    position: int
    incremental_cost: float


@dataclass
class GRASPResult:
    best_solution: TOPTWSolution
    best_fitness: float
    average_fitness: float
    fitness_history: List[float]


class GRASPConstructor:
    """GRASP construction working on a single TOPTWSolution"""

    def __init__(self, solution: TOPTWSolution, random_state: np.random.RandomState = None):
        self.solution = solution
        self.random_state = random_state if random_state is not None else np.random.RandomState()

    def get_max_score(self) -> float:
        return self.solution.instance.get_max_score()

    def _new_departure_row(self) -> np.ndarray:
        instance = self.solution.instance
        return np.zeros(len(instance.nodes) + instance.vehicles)

    # =========== Selection rules ============= #
    def aleatory_selection_rcl(self, max_trcl: int) -> int:
        """Uniform position in [0, max_trcl)"""
        return int(self.random_state.randint(0, max_trcl))

    def membership_function(self, rcl: List[Candidate]) -> np.ndarray:
        max_sc = self.get_max_score()
        if max_sc <= 0:
            # Nothing to normalise against, every entry falls outside the cut
            return np.full(len(rcl), np.inf)
        costs = np.array([candidate.incremental_cost for candidate in rcl], dtype=float)
        return 1.0 - costs / max_sc

    def fuzzy_selection_best_fd_rcl(self, rcl: List[Candidate]) -> int:
        """Position of the RCL entry with the lowest membership value"""
        return int(np.argmin(self.membership_function(rcl)))

    def fuzzy_selection_alpha_cut_rcl(self, rcl: List[Candidate], alpha: float = DEFAULT_ALPHA) -> int:
        """
        Fuzzy selection with an alpha cut on the RCL

        Entries whose membership is <= alpha form the cut; one of them is drawn
        uniformly. An empty cut falls back to a uniform draw over the whole RCL.
        """
        membership = self.membership_function(rcl)
        rcl_pos = np.flatnonzero(membership <= alpha)
        if len(rcl_pos) > 0:
            return int(rcl_pos[self.aleatory_selection_rcl(len(rcl_pos))])
        return self.aleatory_selection_rcl(len(rcl))

    # =========== Construction ============= #
    def comprehensive_evaluation(self, customers: List[int], departure_times) -> List[Candidate]:
        """All feasible insertions of all unrouted customers, cheapest first"""
        candidates = []
        for customer in customers:
            for route_index, predecessor, position in self.solution.get_feasible_positions(customer,
                                                                                          departure_times):
                incremental_cost = self.solution.evaluate_incremental_cost(customer, predecessor)
                candidates.append(Candidate(customer, route_index, predecessor, position, incremental_cost))

        # sorted() is stable, ties keep evaluation order
        return sorted(candidates, key=lambda c: c.incremental_cost)

    def update_solution(self, candidate: Candidate, departure_times):
        """Insert the selected candidate and push departure times forward to the depot"""
        solution = self.solution
        nodes = solution.instance.nodes
        solution.insert_customer(candidate.customer, candidate.predecessor)

        departures = departure_times[candidate.route_index]
        depot = solution.get_index_route(candidate.route_index)
        current_time = departures[candidate.predecessor]
        pre = candidate.predecessor

        while True:
            suc = solution.get_successor(pre)
            node_info = nodes[suc]
            reach = current_time + solution.get_distance(pre, suc)
            arrival = max(reach, node_info.ready_time)
            current_time = arrival + node_info.service_time
            if suc == depot:
                break
            departures[suc] = current_time
            solution.set_waiting_time(suc, arrival - reach)
            pre = suc

    def compute_greedy_solution(self, max_size_rcl: int, alpha: float = DEFAULT_ALPHA) -> TOPTWSolution:
        """Build one solution from scratch with the fuzzy alpha cut RCL rule"""
        if max_size_rcl < 1:
            raise ValueError(f"max_size_rcl must be >= 1, got {max_size_rcl}")

        solution = self.solution
        solution.init_solution()
        departure_times = [self._new_departure_row()]
        customers = solution.instance.customers()

        candidates = self.comprehensive_evaluation(customers, departure_times)

        while customers:
            if candidates:
                rcl = candidates[:min(max_size_rcl, len(candidates))]
                pos_selected = self.fuzzy_selection_alpha_cut_rcl(rcl, alpha)
                candidate_selected = rcl[pos_selected]
                customers.remove(candidate_selected.customer)
                self.update_solution(candidate_selected, departure_times)
            elif solution.available_vehicles > 0:
                solution.add_route()
                departure_times.append(self._new_departure_row())
            else:
                logger.debug(f"No feasible insertion and no vehicle left, {len(customers)} customers unrouted")
                break
            candidates = self.comprehensive_evaluation(customers, departure_times)

        solution.evaluate_fitness()
        return solution

    def grasp(self, max_iterations: int, max_size_rcl: int, alpha: float = DEFAULT_ALPHA,
              stop_criterion=None,
              on_iteration: Optional[Callable[[TOPTWSolution, TOPTWSolution], None]] = None) -> GRASPResult:
        """
        Independent restarts of the greedy randomized construction

        Args:
            max_iterations: number of constructions
            max_size_rcl: RCL size
            alpha: alpha cut threshold
            stop_criterion: alns style criterion called as (rng, best, current), defaults to
                            MaxIterations(max_iterations)
            on_iteration: callback receiving (current, best) after every construction

        Returns:
            GRASPResult with a copy of the best solution, best and average fitness
        """
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        stop = stop_criterion if stop_criterion is not None else MaxIterations(max_iterations)

        best = None
        current = None
        fitness_history = []

        while not stop(self.random_state, best, current):
            current = self.compute_greedy_solution(max_size_rcl, alpha)
            fitness = current.objective()
            fitness_history.append(fitness)

            if best is None or fitness > best.objective():
                best = current.copy()
            if on_iteration is not None:
                on_iteration(current, best)

        average_fitness = sum(fitness_history) / len(fitness_history) if fitness_history else 0.0
        best_fitness = best.objective() if best is not None else 0.0
        logger.info(f" --> AVERAGE: {average_fitness}")
        logger.info(f" --> BEST SOLUTION: {best_fitness}")
        return GRASPResult(best, best_fitness, average_fitness, fitness_history)
