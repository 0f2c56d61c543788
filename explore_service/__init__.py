"""
Explore Service - home page and explore listings
"""
