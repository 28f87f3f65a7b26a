"""Benchmarking subsystem for bundlebench.

Measures installed package sizes, times repeated clean builds of two
versions of a build tool, and writes the JSON results and HTML report.
"""
