"""
env/cartpole.py - JAX cart-pole physics
State format: [x, ẋ, θ, θ̇]  (θ = 0 is upright)
"""

from __future__ import annotations
from functools import partial
from dataclasses import dataclass, fields

import jax
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array, Float, Bool


@dataclass(frozen=True)
class CartPoleParams:
    """Cart-pole physical parameters"""
    mc: float = 1.0      # Cart mass [kg]
    mp: float = 0.1      # Pole mass [kg]
    l : float = 0.5      # Pole half-length [m]
    g : float = 9.8      # Gravity [m/s^2]
    force_mag: float = 10.0  # Force level [N]
    dt: float = 0.01     # Integration step [s]


@dataclass(frozen=True)
class TrackLimits:
    """Failure region: cart hits a block or the pole tips past the angle limit."""
    left: float = -3.0   # [m]
    right: float = 3.0   # [m]
    angle: float = 0.2   # [rad], about 11.5 degrees


@dataclass(frozen=True)
class CartPoleState:
    """Single-precision cart-pole state value."""
    position: float = 0.0
    velocity: float = 0.0
    angle: float = 0.0
    angular_velocity: float = 0.0

    def __post_init__(self):
        # Store exactly what the float32 kernels see
        for f in fields(self):
            object.__setattr__(self, f.name, float(np.float32(getattr(self, f.name))))

    @classmethod
    def zero(cls) -> "CartPoleState":
        return cls()

    @classmethod
    def from_array(cls, arr) -> "CartPoleState":
        """Build a state from a length-4 array [x, ẋ, θ, θ̇]."""
        arr = np.asarray(arr, dtype=np.float32)
        if arr.shape != (4,):
            raise ValueError(f"Expected state format [x, ẋ, θ, θ̇], got shape {arr.shape}")
        return cls(*arr.tolist())

    def as_array(self) -> np.ndarray:
        return np.array(
            [self.position, self.velocity, self.angle, self.angular_velocity],
            dtype=np.float32,
        )


# ---------------------------------------------------------------------------
# 0. Double-precision thresholds for float32 states
#    For a float32 x and a real threshold t:
#      x < t  <=>  x < float32_above(t)      x >= t <=> x >= float32_above(t)
#      x > t  <=>  x > float32_below(t)
# ---------------------------------------------------------------------------
def float32_above(value: float) -> np.float32:
    """Smallest float32 that is >= `value`."""
    f = np.float32(value)
    if float(f) < value:
        f = np.nextafter(f, np.float32(np.inf))
    return f


def float32_below(value: float) -> np.float32:
    """Largest float32 that is <= `value`."""
    f = np.float32(value)
    if float(f) > value:
        f = np.nextafter(f, np.float32(-np.inf))
    return f


# ---------------------------------------------------------------------------
# 1. Pure physics kernel – one explicit Euler step
# ---------------------------------------------------------------------------
@partial(jax.jit, static_argnames=("params",))
def _step_core(
    state: Float[Array, "4"],
    force: Float[Array, ""],
    *,
    params: CartPoleParams,
) -> Float[Array, "4"]:
    """Advance [x, ẋ, θ, θ̇] by one timestep under a horizontal force."""
    x, xdot, theta, thdot = state
    mc, mp, l, g = params.mc, params.mp, params.l, params.g
    total_mass = mc + mp

    ct = jnp.cos(theta)
    st = jnp.sin(theta)
    thddot = (total_mass * g * st - (force + mp * l * thdot * thdot * st) * ct) / (
        4.0 / 3.0 * total_mass * l - mp * l * ct * ct
    )
    xddot = (force + mp * l * (thdot * thdot * st - thddot * ct)) / total_mass

    # Every update uses the pre-step values
    dt = params.dt
    return jnp.stack([
        x + xdot * dt,
        xdot + xddot * dt,
        theta + thdot * dt,
        thdot + thddot * dt,
    ])


# ---------------------------------------------------------------------------
# 2. Failure predicate
# ---------------------------------------------------------------------------
@partial(jax.jit, static_argnames=("limits",))
def _failure_core(
    state: Float[Array, "4"],
    *,
    limits: TrackLimits,
) -> Bool[Array, ""]:
    x, _, theta, _ = state
    return (
        (x > float32_below(limits.right))
        | (x < float32_above(limits.left))
        | (jnp.abs(theta) > float32_below(limits.angle))
    )


def step(
    state: CartPoleState,
    force: float,
    params: CartPoleParams = CartPoleParams(),
) -> CartPoleState:
    """
    Integrate the cart-pole dynamics over one fixed timestep.

    Args:
        state: Current state
        force: Horizontal force on the cart [N], positive pushes right
        params: Physical parameters

    Returns:
        The state one timestep later. Deterministic: identical inputs give
        bit-identical outputs.
    """
    out = _step_core(state.as_array(), jnp.float32(force), params=params)
    return CartPoleState.from_array(out)


def is_failure(state: CartPoleState, limits: TrackLimits = TrackLimits()) -> bool:
    """True iff the cart left the track or the pole tipped past the angle limit."""
    return bool(_failure_core(state.as_array(), limits=limits))
