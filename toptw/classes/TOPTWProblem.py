#-*- coding: utf-8 -*-
"""
Created on Thur August 14 04:26:17 2025

GRASP (Greedy Randomized Adaptive Search Procedure) construction for the
Team Orienteering Problem with Time Windows (TOPTW), solving the Solomon based
TOPTW benchmark instances of Righini & Salani / Montemanni & Gambardella.

Data instances The format of the data files is as follows:

The first line gives the instance id, the number of vehicles and the number of nodes (depot excluded)
The second line is skipped
From the third line, for each node (starting with the depot):
The index of the node
The x coordinate
The y coordinate
The service time
The score
(...)
The ready time  (token 7 for the depot, token 8 for the customers)
The due time    (token 8 for the depot, token 9 for the customers)


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

import math
import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Sequence

import numpy as np


class InstanceFormatError(ValueError):
    """Raised when an instance file does not follow the TOPTW format"""


class NodeKind(Enum):
    CUSTOMER = "customer"
    DEPOT = "depot"


@dataclass
class Node:
    """A point of interest or a depot"""
    id: int
    x: float
    y: float
    score: float
    ready_time: float
    due_time: float
    service_time: float
    kind: NodeKind = NodeKind.CUSTOMER

    @property
    def is_depot(self) -> bool:
        return self.kind is NodeKind.DEPOT


class TOPTWInstance:
    """Represents a TOPTW instance from the Solomon based benchmark"""

    def __init__(self, filename: str = None, data: str = None):
        self.filename = None
        self.vehicles = 0
        self.n_pois = 0
        self.depots = 0
        self.nodes: List[Node] = []
        self.distances = np.zeros((0, 0))
        self.max_time_per_route = 0.0

        if filename and not data:
            self.load_from_file(filename)
        elif data and not filename:
            self.parse_data(data)
            self.filename = "from_data"
        elif filename and data:
            # If both are provided, treat 'data' as the folder path and 'filename' as the file
            self.load_from_file(os.path.join(data, filename))
        else:
            raise ValueError("Either filename or data must be provided")

    @property
    def max_routes(self) -> int:
        return self.vehicles

    def load_from_file(self, filepath: str):
        """Load TOPTW data from file"""
        self.filename = os.path.basename(filepath)
        try:
            with open(filepath, 'r') as f:
                file_content = f.read()
        except FileNotFoundError:
            raise FileNotFoundError(f"Could not find file: {filepath}")
        try:
            self.parse_data(file_content)
        except InstanceFormatError as e:
            raise InstanceFormatError(f"Error reading file {filepath}: {e}") from e

    def parse_data(self, data: str):
        """Parse TOPTW data format"""
        lines = data.strip().split('\n')

        # First line: instance id, vehicles, nodes
        header = lines[0].split()
        try:
            self.vehicles = int(header[1])
            self.n_pois = int(header[2])
        except (IndexError, ValueError) as e:
            raise InstanceFormatError(f"line 1: cannot read vehicles and nodes from {lines[0]!r}") from e

        if self.vehicles < 1 or self.n_pois < 0:
            raise InstanceFormatError(f"line 1: invalid vehicles/nodes {self.vehicles}/{self.n_pois}")

        # Second line is skipped, then depot + customers
        if len(lines) < self.n_pois + 3:
            raise InstanceFormatError(f"expected {self.n_pois + 1} node lines, "
                                      f"found {max(0, len(lines) - 2)}")

        self.nodes = []
        self.depots = 0
        for i in range(self.n_pois + 1):
            line_number = i + 3
            self.nodes.append(self._parse_node(i, lines[i + 2], line_number))

        self.max_time_per_route = self.nodes[0].due_time

        # Calculate distance matrix
        self.calculate_distances()

    @staticmethod
    def _parse_node(i: int, line: str, line_number: int) -> Node:
        parts = line.split()
        ready_idx, due_idx = (7, 8) if i == 0 else (8, 9)
        if len(parts) <= due_idx:
            raise InstanceFormatError(f"line {line_number}: expected at least {due_idx + 1} tokens, "
                                      f"got {len(parts)}")
        try:
            node = Node(
                id=i,
                x=float(parts[1]),
                y=float(parts[2]),
                service_time=float(parts[3]),
                score=0.0 if i == 0 else float(parts[4]),
                ready_time=float(parts[ready_idx]),
                due_time=float(parts[due_idx]),
                kind=NodeKind.DEPOT if i == 0 else NodeKind.CUSTOMER,
            )
        except ValueError as e:
            raise InstanceFormatError(f"line {line_number}: {e}") from e

        if node.ready_time > node.due_time:
            raise InstanceFormatError(f"line {line_number}: ready time {node.ready_time} "
                                      f"after due time {node.due_time}")
        return node

    def calculate_distances(self):
        """Calculate Euclidean distance matrix"""
        n = len(self.nodes)
        self.distances = np.zeros((n, n))

        for i in range(n):
            for j in range(i + 1, n):
                dx = self.nodes[i].x - self.nodes[j].x
                dy = self.nodes[i].y - self.nodes[j].y
                self.distances[i][j] = math.sqrt(dx * dx + dy * dy)
                self.distances[j][i] = self.distances[i][j]

    def _append_node(self, node: Node) -> int:
        xs = np.array([n.x for n in self.nodes])
        ys = np.array([n.y for n in self.nodes])
        row = np.hypot(xs - node.x, ys - node.y)

        n = len(self.nodes)
        grown = np.zeros((n + 1, n + 1))
        grown[:n, :n] = self.distances
        grown[n, :n] = row
        grown[:n, n] = row
        self.distances = grown
        self.nodes.append(node)
        return node.id

    def add_node(self, x: float, y: float, score: float, ready_time: float,
                 due_time: float, service_time: float = 0.0) -> int:
        """Append a new customer and return its id"""
        if ready_time > due_time:
            raise ValueError(f"ready time {ready_time} after due time {due_time}")
        node = Node(len(self.nodes), x, y, score, ready_time, due_time, service_time)
        self.n_pois += 1
        return self._append_node(node)

    def add_node_depot(self) -> int:
        """Append a synthetic depot, a copy of depot 0 used as the start of one more route"""
        depot = replace(self.nodes[0], id=len(self.nodes), score=0.0, kind=NodeKind.DEPOT)
        self.depots += 1
        return self._append_node(depot)

    def is_depot(self, node_id: int) -> bool:
        return self.nodes[node_id].is_depot

    def customers(self) -> List[int]:
        """Ids of all customer nodes"""
        return [node.id for node in self.nodes if not node.is_depot]

    def depot_ids(self) -> List[int]:
        """Ids of depot 0 followed by the synthetic depots, in creation order"""
        return [node.id for node in self.nodes if node.is_depot]

    def get_distance(self, i: int, j: int) -> float:
        return float(self.distances[i][j])

    def get_route_distance(self, route: Sequence[int]) -> float:
        """Total distance of a node sequence"""
        return sum(self.get_distance(route[k], route[k + 1]) for k in range(len(route) - 1))

    def get_max_score(self) -> float:
        return max(node.score for node in self.nodes)

    def __str__(self):
        column = 15
        headers = ["CUST NO.", "XCOORD.", "YCOORD.", "SCORE", "READY TIME", "DUE DATE", "SERVICE TIME"]
        text = f"Nodes: {self.n_pois}\n"
        text += "".join(f"{h:>{column}}" for h in headers) + "\n"
        for node in self.nodes:
            values = [node.id, node.x, node.y, node.score, node.ready_time, node.due_time, node.service_time]
            text += "".join(f"{v:>{column}}" if isinstance(v, int) else f"{v:>{column}.3f}" for v in values)
            text += "\n"
        text += f"Vehicles: {self.vehicles}\n"
        return text
