"""Performance benchmarks for stochopt.

This package contains microbenchmarks for hot paths in the library: the
AdaGrad step rule and full epochs over a logistic regression objective.
"""
