"""
Configuration loading and scoring policy.
"""
