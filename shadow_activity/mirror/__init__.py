"""
Mirror Engine — Replay source commit activity as shadow commits.

This package reads qualifying commits from a source repository, sizes
each one, and recreates its line-count footprint on a single artifact
file in the target repository, under a public identity and the original
author date.
"""
