"""
env/boxes.py - fixed 162-box partition of the cart-pole state space
State format: [x, ẋ, θ, θ̇]

Each axis is split by fixed thresholds and every bin contributes a fixed
offset; the box index is the sum of the four offsets:

    x   : 3 bins  -> 0, 1, 2
    ẋ   : 3 bins  -> 0, 3, 6
    θ   : 6 bins  -> 0, 9, 18, 27, 36, 45
    θ̇   : 3 bins  -> 0, 54, 108
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jaxtyping import Array, Float, Int

from env.cartpole import CartPoleState, float32_above

# Thresholds
XL = 0.8          # cart position [m]
VL = 0.5          # cart velocity [m/s]
T1 = 0.01745      # 1 degree [rad]
T6 = 0.10472      # 6 degrees [rad]
W50 = 0.87266     # 50 degrees/s [rad/s]

# Bins are half-open [lo, hi): a value equal to an edge falls in the upper bin
POSITION_EDGES = (-XL, XL)
VELOCITY_EDGES = (-VL, VL)
ANGLE_EDGES = (-T6, -T1, 0.0, T1, T6)
ANGULAR_VELOCITY_EDGES = (-W50, W50)

POSITION_OFFSETS = (0, 1, 2)
VELOCITY_OFFSETS = (0, 3, 6)
ANGLE_OFFSETS = (0, 9, 18, 27, 36, 45)
ANGULAR_VELOCITY_OFFSETS = (0, 54, 108)

NUM_BOXES = 162
ZERO_STATE_BOX = 85


def _axis_offset(value, edges, offsets):
    # value >= edge, judged against the real (double) edge
    edges32 = jnp.asarray([float32_above(e) for e in edges], dtype=jnp.float32)
    idx = jnp.searchsorted(edges32, value, side="right")
    return jnp.asarray(offsets, dtype=jnp.int32)[idx]


@jax.jit
def _box_core(state: Float[Array, "4"]) -> Int[Array, ""]:
    x, xdot, theta, thdot = state
    return (
        _axis_offset(x, POSITION_EDGES, POSITION_OFFSETS)
        + _axis_offset(xdot, VELOCITY_EDGES, VELOCITY_OFFSETS)
        + _axis_offset(theta, ANGLE_EDGES, ANGLE_OFFSETS)
        + _axis_offset(thdot, ANGULAR_VELOCITY_EDGES, ANGULAR_VELOCITY_OFFSETS)
    )


_box_batched = jax.jit(jax.vmap(_box_core))


def quantize(state: CartPoleState) -> int:
    """Map a state to its box index in [0, 161]."""
    return int(_box_core(state.as_array()))


def quantize_batch(states: Float[Array, "batch 4"]) -> Int[Array, "batch"]:
    """Vectorized quantize for an (N, 4) array of [x, ẋ, θ, θ̇] rows."""
    states = jnp.asarray(states, dtype=jnp.float32)
    if states.ndim != 2 or states.shape[-1] != 4:
        raise ValueError(f"Expected batch of states with shape (batch, 4), got {states.shape}")
    return _box_batched(states)
