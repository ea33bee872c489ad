"""
Service file loading.
"""
