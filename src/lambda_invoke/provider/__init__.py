"""
Cloud providers the invoke pipeline can call through.
"""
