"""
The invoke pipeline: resolve the input payload, call the function and render
its reply together with the tail of its execution log.
"""
