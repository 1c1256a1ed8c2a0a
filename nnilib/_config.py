"""
Method selectors and per-entry-point configuration.

Coordinate schemes form a closed set, ``Sibson(d)``, ``Triangle()``,
``Nearest()`` and ``Laplace()``, represented by the frozen ``Interpolator``
record. Differentiation methods are the ``DifferentiationMethod`` enum.
Entry points take their options as keywords and gather them into an
``EvaluationConfig`` or ``DifferentiationConfig`` before dispatching.

Usage
-----
    from nnilib import Sibson, Iterative, EvaluationConfig

    cfg = EvaluationConfig(method=Sibson(1), parallel=False)
    cfg = EvaluationConfig(method="laplace")   # names are accepted too
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np


class InterpolatorKind(str, Enum):
    SIBSON = "sibson"
    TRIANGLE = "triangle"
    NEAREST = "nearest"
    LAPLACE = "laplace"


@dataclass(frozen=True)
class Interpolator:
    """A natural-neighbour coordinate scheme.

    Attributes
    ----------
    kind : InterpolatorKind
        Which coordinates to compute.
    continuity : int
        Smoothness ``d`` of the interpolant at the data sites, ``C(d)``.
        Only Sibson supports ``d = 1``; the other schemes are ``C(0)``.
    """
    kind: InterpolatorKind
    continuity: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'kind', InterpolatorKind(self.kind))
        if self.kind is InterpolatorKind.SIBSON:
            if self.continuity not in (0, 1):
                raise ValueError(
                    "The Sibson interpolant is only defined for d in (0, 1)."
                )
        elif self.continuity != 0:
            object.__setattr__(self, 'continuity', 0)

    def __repr__(self):
        name = self.kind.value.capitalize()
        if self.kind is InterpolatorKind.SIBSON:
            return f"{name}({self.continuity})"
        return f"{name}()"


def Sibson(d: int = 0) -> Interpolator:
    """Sibson's coordinates with ``C(d)`` continuity at the data sites."""
    return Interpolator(InterpolatorKind.SIBSON, d)


def Triangle(d: int = 0) -> Interpolator:
    """Piecewise linear interpolation over the enclosing triangle."""
    return Interpolator(InterpolatorKind.TRIANGLE)


def Nearest(d: int = 0) -> Interpolator:
    """Value at the nearest data site."""
    return Interpolator(InterpolatorKind.NEAREST)


def Laplace(d: int = 0) -> Interpolator:
    """Laplace (non-Sibsonian) coordinates."""
    return Interpolator(InterpolatorKind.LAPLACE)


_INTERPOLATOR_NAMES = {
    "sibson": Sibson(0),
    "sibson_0": Sibson(0),
    "sibson_1": Sibson(1),
    "triangle": Triangle(),
    "nearest": Nearest(),
    "laplace": Laplace(),
}


def as_interpolator(method) -> Interpolator:
    """Coerce an ``Interpolator``, ``InterpolatorKind`` or name into an ``Interpolator``."""
    if isinstance(method, Interpolator):
        return method
    if isinstance(method, InterpolatorKind):
        return Interpolator(method)
    if isinstance(method, str):
        key = method.lower()
        if key in _INTERPOLATOR_NAMES:
            return _INTERPOLATOR_NAMES[key]
    raise ValueError(
        f"Unknown interpolator: {method!r}. "
        f"Available: {list(_INTERPOLATOR_NAMES.keys())}"
    )


class DifferentiationMethod(str, Enum):
    DIRECT = "direct"  # single local Taylor fit
    ITERATIVE = "iterative"  # refine using known gradients at neighbours


Direct = DifferentiationMethod.DIRECT
Iterative = DifferentiationMethod.ITERATIVE


def as_differentiation_method(method) -> DifferentiationMethod:
    """Coerce a ``DifferentiationMethod`` or its name."""
    if isinstance(method, DifferentiationMethod):
        return method
    try:
        return DifferentiationMethod(str(method).lower())
    except ValueError:
        raise ValueError(
            f"Unknown differentiator: {method!r}. "
            f"Available: {[m.value for m in DifferentiationMethod]}"
        ) from None


RngLike = Union[None, int, np.random.Generator]


@dataclass(frozen=True)
class EvaluationConfig:
    """Options for evaluating an interpolant.

    Attributes
    ----------
    method : Interpolator or str
        Coordinate scheme (default ``Sibson()``).
    parallel : bool
        Fan bulk evaluations out over the interpolant's workers.
    project : bool
        Project points outside the convex hull onto the nearest hull edge and
        blend its two endpoints. If False such points evaluate to ``nan``.
    rng : None, int or numpy Generator
        Random source used by point location.
    """
    method: Interpolator = Sibson()
    parallel: bool = True
    project: bool = True
    rng: RngLike = None

    def __post_init__(self):
        object.__setattr__(self, 'method', as_interpolator(self.method))


@dataclass(frozen=True)
class DifferentiationConfig:
    """Options for evaluating a differentiator.

    Attributes
    ----------
    method : DifferentiationMethod, str or None
        ``Direct`` or ``Iterative``. None picks ``Iterative`` when the
        interpolant carries gradients and ``Direct`` otherwise.
    interpolant_method : Interpolator or str
        Scheme used to estimate the function value at a query point.
    parallel : bool
        Fan bulk evaluations out over the interpolant's workers.
    project : bool
        Project exterior points onto the hull; otherwise they give ``inf``.
    use_cubic_terms : bool
        Fit cubic terms in second-order Direct estimation (9 unknowns
        instead of 5).
    alpha : float
        Weight of value residuals against gradient residuals in the
        Iterative method, in ``[0, 1]``.
    use_sibson_weight : bool
        Weight Iterative second-order residuals by the natural coordinates.
    rng : None, int or numpy Generator
        Random source used by point location.
    """
    method: Optional[DifferentiationMethod] = None
    interpolant_method: Interpolator = Sibson()
    parallel: bool = True
    project: bool = False
    use_cubic_terms: bool = True
    alpha: float = 0.1
    use_sibson_weight: bool = True
    rng: RngLike = None

    def __post_init__(self):
        if self.method is not None:
            object.__setattr__(self, 'method',
                               as_differentiation_method(self.method))
        object.__setattr__(self, 'interpolant_method',
                           as_interpolator(self.interpolant_method))
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError("alpha must be in [0, 1]")
