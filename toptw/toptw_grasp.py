#-*- coding: utf-8 -*-
"""
Created on Thur August 14 04:26:17 2025

GRASP (Greedy Randomized Adaptive Search Procedure) for the Team Orienteering
Problem with Time Windows, run on the Solomon based TOPTW benchmark instances
(c1xx, r1xx, rc1xx) of Righini & Salani / Montemanni & Gambardella.

Usage:
    toptw-grasp Instances/TOPTW/c101.txt Instances/TOPTW/r101.txt --iterations 1000 --rcl-size 3 5 7 --seed 1


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

import argparse
import logging
import os
import sys
import time
from datetime import timedelta
from typing import List, Tuple

import matplotlib.pyplot as plt
import numpy as np
from alns.stop import MaxIterations

from toptw.classes.EarlyStopping import EarlyStoppingCriterion
from toptw.classes.GRASPConfig import GRASPConfig
from toptw.classes.GRASPProgressLogger import GRASPProgressLogger
from toptw.classes.TOPTWProblem import InstanceFormatError, TOPTWInstance
from toptw.classes.TOPTWSolution import TOPTWSolution
from toptw.construct_oper.GRASPConstructor import DEFAULT_ALPHA, GRASPConstructor
from toptw.functions.Visualisation import plot_objectives, plot_solution

logger = logging.getLogger(__name__)


def solve_toptw_with_grasp(instance: TOPTWInstance, max_iterations: int = 100, rcl_size: int = 3,
                           alpha: float = DEFAULT_ALPHA, seed: int = None, report_interval: int = 10,
                           patience_ratio: float = None,
                           is_plot: bool = False) -> Tuple[TOPTWSolution, GRASPProgressLogger]:
    """Solve TOPTW with GRASP restarts and progress tracking"""
    random_state = np.random.RandomState(seed)
    solution = TOPTWSolution(instance)
    grasp = GRASPConstructor(solution, random_state)

    progress_logger = GRASPProgressLogger(log_mode='interval', interval=report_interval)

    if patience_ratio is not None:
        stop_criterion = EarlyStoppingCriterion(max_iterations, patience_ratio=patience_ratio)
    else:
        stop_criterion = MaxIterations(max_iterations)

    logger.info(f"Starting GRASP for {max_iterations} iterations (RCL size {rcl_size}, alpha {alpha})...")

    result = grasp.grasp(max_iterations, rcl_size, alpha,
                         stop_criterion=stop_criterion,
                         on_iteration=progress_logger.log_progress)

    progress_logger.final_report()

    if is_plot:
        _, axes = plt.subplots(1, 2, figsize=(16, 7))
        plot_solution(result.best_solution, ax=axes[0])
        plot_objectives(progress_logger, ax=axes[1])
        plt.show()

    return result.best_solution, progress_logger


def solve_from_config(config: GRASPConfig, instance: TOPTWInstance = None) -> Tuple[TOPTWSolution, GRASPProgressLogger]:
    if instance is None:
        instance = TOPTWInstance(filename=config.instance_path)
    return solve_toptw_with_grasp(instance,
                                  max_iterations=config.iterations,
                                  rcl_size=config.rcl_size,
                                  alpha=config.alpha,
                                  seed=config.seed,
                                  report_interval=config.report_interval,
                                  patience_ratio=config.patience_ratio,
                                  is_plot=config.plot)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toptw-grasp",
        description="GRASP construction for the Team Orienteering Problem with Time Windows")
    parser.add_argument("instances", nargs="+", help="TOPTW instance files")
    parser.add_argument("--iterations", type=int, default=100, help="GRASP restarts per setting")
    parser.add_argument("--rcl-size", type=int, nargs="+", default=[3],
                        help="one or more RCL sizes, each run separately")
    parser.add_argument("--alpha", type=float, default=DEFAULT_ALPHA, help="alpha cut threshold")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--patience-ratio", type=float, default=None,
                        help="stop after this fraction of iterations without improvement")
    parser.add_argument("--report-interval", type=int, default=10)
    parser.add_argument("--show-solution", action="store_true", help="print the best solution report")
    parser.add_argument("--plot", action="store_true", help="plot best routes and score history")
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: List[str] = None) -> int:
    """Run GRASP on every instance for every RCL size"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    try:
        configs = [GRASPConfig(instance_path=path, iterations=args.iterations, rcl_size=rcl_size,
                               alpha=args.alpha, seed=args.seed, patience_ratio=args.patience_ratio,
                               report_interval=args.report_interval, plot=args.plot)
                   for path in args.instances for rcl_size in args.rcl_size]
    except ValueError as e:
        parser.error(str(e))

    instances = {}
    for config in configs:
        if config.instance_path not in instances:
            try:
                instances[config.instance_path] = TOPTWInstance(filename=config.instance_path)
            except (FileNotFoundError, InstanceFormatError) as e:
                logger.error(f"Cannot load instance: {e}")
                return 1
            instance = instances[config.instance_path]
            print(f" --> Instance: {os.path.basename(config.instance_path)}")
            logger.info(f"Instance loaded: {instance.n_pois} customers, {instance.vehicles} vehicles, "
                        f"max time per route {instance.max_time_per_route}")

        best_solution, progress_logger = solve_from_config(config, instances[config.instance_path])
        print(f"     RCL {config.rcl_size}: AVERAGE = {progress_logger.average_objective:.2f}, "
              f"BEST = {progress_logger.best_objective:.2f}, "
              f"FEASIBLE = {best_solution.is_feasible()}")
        if args.show_solution:
            print(best_solution.get_info_solution())

    return 0


if __name__ == "__main__":
    # Start timer
    start_time = time.time()
    #
    exit_code = main()
    #
    end_time = time.time() - start_time

    print("================================================================")
    print('Finished performing everything, time elapsed {}'.format(str(timedelta(seconds=end_time))))
    print("================================================================")
    sys.exit(exit_code)
