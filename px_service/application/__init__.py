"""
Application layer
"""
