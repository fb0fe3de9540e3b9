"""
env/__init__.py

Cart-pole environment package.

This package provides:
- Pure-JAX cart-pole physics (one Euler step per call) and failure check
- The fixed 162-box state partition
- The episodic closed-loop driver for box-based learners
"""
