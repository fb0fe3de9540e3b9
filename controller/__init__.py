"""
controller/__init__.py

Box-based learning controllers: the learner interface, an ASE/ACE
actor-critic learner and a constant-action baseline.
"""
