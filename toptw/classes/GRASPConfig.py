#-*- coding: utf-8 -*-
"""
Created on Thur August 14 04:26:17 2025

Run settings of one GRASP experiment.


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

from dataclasses import dataclass
from typing import Optional


@dataclass
class GRASPConfig:
    """GRASP parameters, validated on creation"""
    instance_path: str
    iterations: int = 100
    rcl_size: int = 3
    alpha: float = 0.8
    seed: Optional[int] = None
    patience_ratio: Optional[float] = None  # None disables early stopping
    report_interval: int = 10
    plot: bool = False

    def __post_init__(self):
        if not self.instance_path:
            raise ValueError("instance_path must be provided")
        if self.iterations < 1:
            raise ValueError("iterations must be >= 1")
        if self.rcl_size < 1:
            raise ValueError("rcl_size must be >= 1")
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError("alpha must be in [0, 1]")
        if self.patience_ratio is not None and not 0.0 < self.patience_ratio <= 1.0:
            raise ValueError("patience_ratio must be in (0, 1]")
        if self.report_interval < 1:
            raise ValueError("report_interval must be >= 1")
