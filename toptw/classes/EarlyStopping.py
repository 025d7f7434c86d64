#-*- coding: utf-8 -*-
"""
Created on Thur August 14 04:26:17 2025

Stopping criterion for the GRASP restart loop: a maximum number of restarts
plus an optional patience on non improving restarts (fitness is maximised).


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

from alns.stop import StoppingCriterion

logger = logging.getLogger(__name__)


class EarlyStoppingCriterion(StoppingCriterion):
    """
    Stops after max_iterations restarts, or earlier once the best score has not
    improved by improvement_threshold for patience restarts
    """

    def __init__(self, max_iterations: int, improvement_threshold: float = None,
                 patience_ratio: float = 0.5, adaptive_threshold: bool = True):
        """
        Args:
            max_iterations: Maximum number of restarts
            improvement_threshold: Minimum score gain to reset the patience counter
                                 (None = auto-calculate, float = fixed threshold)
            patience_ratio: Fraction of max_iterations to wait (default: 0.5 = 50%)
            adaptive_threshold: Whether to adapt threshold based on the first solution
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if not 0 < patience_ratio <= 1:
            raise ValueError("patience_ratio must be in (0, 1]")

        self.max_iterations = max_iterations
        self.base_improvement_threshold = improvement_threshold
        self.patience = max(1, int(max_iterations * patience_ratio))
        self.adaptive_threshold = adaptive_threshold

        self.iterations_without_improvement = 0
        self.best_objective = float('-inf')
        self.current_iteration = 0
        self.initial_objective = None
        self.improvement_threshold = improvement_threshold

        self.total_improvements = 0
        self.improvement_history = []

    def _calculate_adaptive_threshold(self, initial_obj: float) -> float:
        """0.1% of the first score, kept between 0.1 and 5.0"""
        if initial_obj <= 0:
            return 1.0
        adaptive = max(0.1, min(initial_obj * 0.001, 5.0))
        return round(adaptive, 2)

    def __call__(self, rng, best, current) -> bool:
        """
        Called before every restart

        Args:
            rng: Random number generator (unused)
            best: Best solution so far, None before the first restart
            current: Last constructed solution, None before the first restart

        Returns:
            bool: True if should stop, False otherwise
        """
        self.current_iteration += 1

        if best is not None:
            current_best_objective = best.objective()

            if self.initial_objective is None:
                self.initial_objective = current_best_objective
                self.best_objective = current_best_objective
                if self.base_improvement_threshold is not None:
                    self.improvement_threshold = self.base_improvement_threshold
                elif self.adaptive_threshold:
                    self.improvement_threshold = self._calculate_adaptive_threshold(self.initial_objective)
                else:
                    self.improvement_threshold = 1.0
                logger.debug(f"Improvement threshold set to: {self.improvement_threshold}")
            else:
                improvement = current_best_objective - self.best_objective
                if improvement >= self.improvement_threshold:
                    self.best_objective = current_best_objective
                    self.iterations_without_improvement = 0
                    self.total_improvements += 1
                    self.improvement_history.append((self.current_iteration, improvement))
                else:
                    self.iterations_without_improvement += 1
                    if current_best_objective > self.best_objective:
                        self.best_objective = current_best_objective

        if self.current_iteration > self.max_iterations:
            logger.info(f"Stopping: Reached maximum iterations ({self.max_iterations})")
            self._log_final_stats()
            return True

        if self.iterations_without_improvement >= self.patience:
            logger.info(f"Early stopping: No improvement >= {self.improvement_threshold} "
                        f"for {self.iterations_without_improvement} iterations "
                        f"(patience {self.patience}, {self.patience / self.max_iterations * 100:.0f}% of max)")
            self._log_final_stats()
            return True

        return False

    def _log_final_stats(self):
        if self.initial_objective is not None:
            total_improvement = self.best_objective - self.initial_objective
            logger.info(f"Early Stopping Statistics: "
                        f"restarts {self.current_iteration - 1}, "
                        f"significant improvements {self.total_improvements}, "
                        f"total improvement {total_improvement:.2f}")
