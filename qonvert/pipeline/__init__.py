"""
This package contains the batch conversion pipeline of qonvert.

The pipeline orchestrates a whole batch: it runs every job concurrently, wires
each job's progress to its own bar, isolates failures per job and collects the
outcome of every job.
"""
