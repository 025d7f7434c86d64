#-*- coding: utf-8 -*-
"""
Created on Thur August 14 04:26:17 2025

Plots of TOPTW routes and of the GRASP score history.


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

import matplotlib.pyplot as plt

from toptw.classes.GRASPProgressLogger import GRASPProgressLogger
from toptw.classes.TOPTWSolution import TOPTWSolution


def plot_solution(solution: TOPTWSolution, ax=None, title: str = None):
    """Draw every route over the customers; unrouted customers are hollow"""
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))

    instance = solution.instance
    depot = instance.nodes[0]
    routed = set(solution.get_routed_customers())

    unrouted = [instance.nodes[c] for c in instance.customers() if c not in routed]
    if unrouted:
        ax.scatter([n.x for n in unrouted], [n.y for n in unrouted], s=20,
                   facecolors='none', edgecolors='gray', label='Unrouted')

    for k, route in enumerate(solution.get_routes()):
        if len(route) <= 2:
            continue
        xs = [instance.nodes[n].x for n in route]
        ys = [instance.nodes[n].y for n in route]
        ax.plot(xs, ys, linewidth=1.5, label=f"Route {k}")
        ax.scatter(xs[1:-1], ys[1:-1], s=20)

    ax.scatter([depot.x], [depot.y], c='red', s=120, marker='s', label='Depot', zorder=5)
    ax.set_title(title or f"{instance.filename}: score {solution.objective():.0f}")
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.legend(loc='best', fontsize=8)
    ax.grid(True)
    return ax


def plot_objectives(progress_logger: GRASPProgressLogger, ax=None):
    """Score of every construction and best score so far"""
    if ax is None:
        _, ax = plt.subplots(figsize=(12, 6))

    iterations = range(1, len(progress_logger.current_objectives) + 1)
    ax.plot(iterations, progress_logger.current_objectives, 'b-', alpha=0.5, label='Current Solution')
    ax.plot(iterations, progress_logger.best_objectives, 'r-', label='Best Solution')
    ax.set_xlabel('Iteration')
    ax.set_ylabel('Score')
    ax.set_title('GRASP Score History')
    ax.legend()
    ax.grid(True)
    return ax
