"""
Domain services for Momentum.
"""
