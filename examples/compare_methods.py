"""
Example: comparing the descent methods of numdescent

Runs all five algorithms on the same smooth objective and prints the
minimizer estimate, the number of iterations and the objective evaluations
spent. Newton-type methods need far fewer iterations but each one pays for a
finite-difference Hessian; the grid line search variants pay for their
exact step with many evaluations per iteration.
"""

import numpy as np

from numdescent import DescentConfig, Status, minimize
from numdescent.optimize import METHODS


def bowl(x):
    return (x[0] - 1.0) ** 2 + (x[1] - 2.0) ** 2


def rosenbrock(x):
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def compare(fun, x0, methods, **options):
    print(f"{'method':<24}{'status':<22}{'nit':>6}{'nfev':>10}  x")
    for name in methods:
        res = minimize(fun, x0, DescentConfig(method=name, **options))
        print(
            f"{name:<24}{res.status.value:<22}{res.nit:>6}{res.nfev:>10}  "
            f"{np.array2string(res.x, precision=6)}"
        )
    print()


def main():
    print("=" * 60)
    print("Quadratic bowl (x - 1)^2 + (y - 2)^2 from (0, 0)")
    print("=" * 60)
    compare(bowl, np.zeros(2), sorted(METHODS), eps1=1e-4, eps2=1e-6, max_iter=1000)

    print("=" * 60)
    print("Rosenbrock from (-1.2, 1)")
    print("=" * 60)
    compare(rosenbrock, np.array([-1.2, 1.0]), ["newton"], max_iter=200)

    res = minimize(rosenbrock, np.array([-1.2, 1.0]), method="newton", max_iter=200)
    if res.status in (Status.CONVERGED, Status.GRADIENT_TOLERANCE):
        print(f"Newton reached f = {res.fun:.3e} in {res.nit} iterations")
    else:
        print(f"Newton stopped early: {res.message}")


if __name__ == "__main__":
    main()
