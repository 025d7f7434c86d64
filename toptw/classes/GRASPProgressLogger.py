#-*- coding: utf-8 -*-
"""
Created on Thur August 14 04:26:17 2025

Progress tracking of the GRASP restart loop (fitness is maximised).


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

logger = logging.getLogger(__name__)


class GRASPProgressLogger:
    """Progress logger plugged into GRASPConstructor.grasp as on_iteration callback"""

    def __init__(self, log_mode: str = 'interval', interval: int = 100):
        """
        Initialize progress logger

        Args:
            log_mode: 'interval' to log every N iterations, 'improvement' to log only on improvements
            interval: Number of iterations between progress reports (if log_mode='interval')
        """
        if log_mode not in ('interval', 'improvement'):
            raise ValueError(f"Unknown log_mode {log_mode!r}")
        self.log_mode = log_mode
        self.interval = interval
        self.iteration_count = 0
        self.best_objectives = []
        self.current_objectives = []
        self.improvements = []
        self.initial_objective = None

    def log_progress(self, candidate_solution, best_solution=None, **kwargs):
        """
        Callback called after every construction

        Args:
            candidate_solution: The solution just constructed
            best_solution: Best solution so far (tracked here anyway, kept for the callback signature)
        """
        self.iteration_count += 1
        candidate_obj = candidate_solution.objective()

        if self.initial_objective is None:
            self.initial_objective = candidate_obj

        self.current_objectives.append(candidate_obj)

        if not self.best_objectives:
            self.best_objectives.append(candidate_obj)
        else:
            self.best_objectives.append(max(self.best_objectives[-1], candidate_obj))

            if self.best_objectives[-1] > self.best_objectives[-2]:
                self.improvements.append(self.iteration_count)
                if self.log_mode == 'improvement':
                    self._report_improvement()

        if self.log_mode == 'interval' and self.iteration_count % self.interval == 0:
            self._report_progress()

    __call__ = log_progress

    @property
    def best_objective(self) -> float:
        return self.best_objectives[-1] if self.best_objectives else 0.0

    @property
    def average_objective(self) -> float:
        if not self.current_objectives:
            return 0.0
        return sum(self.current_objectives) / len(self.current_objectives)

    def _report_progress(self):
        """Report current optimization progress"""
        if not self.best_objectives:
            return

        logger.info(f"Iteration {self.iteration_count:4d}: "
                    f"Current = {self.current_objectives[-1]:8.2f}, "
                    f"Best = {self.best_objectives[-1]:8.2f}")

        if self.improvements:
            last_improvement = max(self.improvements)
            logger.info(f"                   Last improvement at iteration {last_improvement} "
                        f"({self.iteration_count - last_improvement} iterations ago)")

    def _report_improvement(self):
        current_best = self.best_objectives[-1]
        improvement_from_initial = ((current_best - self.initial_objective) / self.initial_objective * 100
                                    if self.initial_objective > 0 else 0)
        logger.info(f"IMPROVEMENT at iteration {self.iteration_count}: "
                    f"New best = {current_best:.2f} "
                    f"(Total improvement: {improvement_from_initial:.1f}%)")

    def final_report(self) -> dict:
        """Log the final optimization summary and return it"""
        if not self.best_objectives:
            logger.info("No optimization data available")
            return {}

        summary = {
            'iterations': self.iteration_count,
            'initial_objective': self.initial_objective,
            'best_objective': self.best_objective,
            'average_objective': self.average_objective,
            'improvements': list(self.improvements),
        }

        logger.info("=" * 60)
        logger.info("GRASP SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Total iterations:     {summary['iterations']}")
        logger.info(f"Initial score:        {summary['initial_objective']:.2f}")
        logger.info(f"Best score:           {summary['best_objective']:.2f}")
        logger.info(f"Average score:        {summary['average_objective']:.2f}")
        logger.info(f"Number of improvements: {len(self.improvements)}")
        if len(self.improvements) > 1:
            gaps = [self.improvements[i] - self.improvements[i - 1] for i in range(1, len(self.improvements))]
            logger.info(f"Average gap between improvements: {sum(gaps) / len(gaps):.1f} iterations")
        logger.info("=" * 60)
        return summary
