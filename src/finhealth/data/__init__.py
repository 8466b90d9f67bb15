"""
Statement models, builders, loaders and validation.
"""
