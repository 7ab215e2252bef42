"""
Compile-and-run job driver.
"""

from .job import JobResult, Outcome, outcome_for_status, run_job

__all__ = ["JobResult", "Outcome", "outcome_for_status", "run_job"]
