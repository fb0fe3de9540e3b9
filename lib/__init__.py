"""
lib/__init__.py

Run configuration, presentation collaborators and plotting.
"""
