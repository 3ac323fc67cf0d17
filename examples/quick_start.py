"""Quick start example: interpolate a tabulated 2D function and its gradient."""

import math

import numpy as np

from ndinterp import Grid, Interpolator


def f(x):
    """A smooth 2D function: sin(x) * exp(-y)."""
    return math.sin(x[0]) * math.exp(-x[1])


# Tabulate on a non-uniform grid
grid = Grid.from_function(
    [np.linspace(-3, 3, 25), [0.0, 0.2, 0.5, 0.9, 1.4, 2.0]],
    f,
)
interp = Interpolator(grid, kernels=["cubic", "cubic"], policies="clamp")

# Evaluate at a test point
point = [1.0, 0.5]
exact = f(point)
result = interp.evaluate(point, derivatives=True)

print(f"Exact:  {exact:.10f}")
print(f"Approx: {result.value:.10f}")
print(f"Error:  {abs(result.value - exact):.2e}")

# Derivative df/dx
dfdx_exact = math.cos(point[0]) * math.exp(-point[1])
dfdx_approx = result.derivatives[0, 0]
print(f"\ndf/dx exact:  {dfdx_exact:.10f}")
print(f"df/dx approx: {dfdx_approx:.10f}")
print(f"df/dx error:  {abs(dfdx_approx - dfdx_exact):.2e}")

# Positive, exponentially varying data: interpolate in log space
decay = Grid.from_function(
    [[0.0, 1.0, 2.0, 4.0, 8.0]], lambda x: 100.0 * math.exp(-0.7 * x[0])
)
print(f"\nlinear:     {Interpolator(decay, 'linear')([3.0])[0]:.6f}")
print(f"log_linear: {Interpolator(decay, 'log_linear')([3.0])[0]:.6f}")
print(f"exact:      {100.0 * math.exp(-2.1):.6f}")
