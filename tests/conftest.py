# tests/conftest.py
"""
Shared fixtures & path hack so `import env` works even when the repo
isn't installed as a package.
"""
import sys
import pathlib
import os
import pytest
import jax

# project root on sys.path ---------------------------------------------------
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# default JAX platform  ------------------------------------------------------
jax.config.update("jax_platform_name", os.getenv("JAX_PLATFORM", "cpu"))


# common fixtures -----------------------------------------------------------
@pytest.fixture(scope="session")
def params():
    from env.cartpole import CartPoleParams
    return CartPoleParams()


@pytest.fixture(scope="session")
def limits():
    from env.cartpole import TrackLimits
    return TrackLimits()


@pytest.fixture
def zero_state():
    from env.cartpole import CartPoleState
    return CartPoleState.zero()

