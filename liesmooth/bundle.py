"""Direct products of Lie groups (and Euclidean vectors) as a single Lie group."""

from __future__ import annotations

import functools
import itertools
import operator
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .lie_group import LieGroup
from .tn import Tn

PartSpec = Union[type, int]


def _slices(sizes: list[int]) -> tuple[slice, ...]:
    ends = list(itertools.accumulate(sizes))
    starts = [0, *ends[:-1]]
    return tuple(slice(s, e) for s, e in zip(starts, ends))


def _block_diag(blocks: list[NDArray[np.float64]]) -> NDArray[np.float64]:
    n = sum(b.shape[0] for b in blocks)
    out = np.zeros((n, n))
    pos = 0
    for b in blocks:
        k = b.shape[0]
        out[pos : pos + k, pos : pos + k] = b
        pos += k
    return out


class Bundle(LieGroup):
    """Direct product ``G_1 x ... x G_n`` with element-wise operations.

    A part is either a Lie group class or a positive integer ``n`` that stands
    for a plain vector in R^n (treated as the translation group T(n)). Use
    ``Bundle.of(...)`` for the class of a given layout, or ``Bundle(...)`` to
    infer the layout from the parts.
    """

    __slots__ = ()

    _SPEC: tuple[PartSpec, ...]
    _PARTS: tuple[type[LieGroup], ...]
    _VECTOR: tuple[bool, ...]
    _REP_SLICES: tuple[slice, ...]
    _DOF_SLICES: tuple[slice, ...]
    _DIM_SLICES: tuple[slice, ...]

    def __new__(cls, *args):
        if cls is Bundle:
            spec = tuple(
                type(arg) if isinstance(arg, LieGroup) else int(np.asarray(arg).size)
                for arg in args
            )
            cls = Bundle.of(*spec)
        return object.__new__(cls)

    def __init__(self, *args) -> None:
        parts, vector = self._layout()
        if len(args) != len(parts):
            raise ValueError(f"{type(self).__name__} expects {len(parts)} parts, got {len(args)}")
        chunks = []
        for arg, part, is_vec in zip(args, parts, vector):
            if is_vec:
                if isinstance(arg, LieGroup):
                    raise TypeError(f"expected a vector, got {type(arg).__name__}")
                arr = np.asarray(arg, dtype=float)
                if arr.shape != (part.DOF,):
                    raise ValueError(f"vector part must have shape ({part.DOF},), got {arr.shape}")
                chunks.append(arr)
            else:
                if type(arg) is not part:
                    raise TypeError(f"expected {part.__name__}, got {type(arg).__name__}")
                chunks.append(arg.coeffs())
        arr = np.concatenate(chunks)
        arr.flags.writeable = False
        self._coeffs = arr

    @classmethod
    def of(cls, *args: PartSpec) -> type[Bundle]:
        """The bundle class for the given part types (classes or vector sizes)."""
        if not args:
            raise ValueError("a bundle needs at least one part")
        spec = []
        for p in args:
            if isinstance(p, type) and issubclass(p, LieGroup):
                if not hasattr(p, "REP_SIZE"):
                    raise TypeError(f"{p.__name__} is not a concrete Lie group")
                spec.append(p)
            elif isinstance(p, type):
                raise TypeError(f"{p.__name__} is not a Lie group")
            else:
                n = operator.index(p)
                if n <= 0:
                    raise ValueError(f"vector size must be positive, got {n}")
                spec.append(n)
        return _bundle_class(tuple(spec))

    def part(self, idx: int):
        """Part number ``idx``: a group element, or an array for vector parts."""
        parts, vector = self._layout()
        idx = operator.index(idx)
        part = parts[idx]
        chunk = self._coeffs[self._REP_SLICES[idx]]
        if vector[idx]:
            return chunk.copy()
        return part._make(chunk)

    def __reduce__(self):
        return (_bundle_from_coeffs, (self._SPEC, self._coeffs.tolist()))

    # -- implementation hooks -------------------------------------------------

    @classmethod
    def _layout(cls) -> tuple[tuple[type[LieGroup], ...], tuple[bool, ...]]:
        if cls is Bundle:
            raise TypeError("parts unknown: use Bundle.of(...) to select a layout")
        return cls._PARTS, cls._VECTOR

    @classmethod
    def _concrete_for(cls, coeffs: NDArray[np.float64]) -> type[LieGroup]:
        cls._layout()
        return cls

    @classmethod
    def _identity_coeffs(cls) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return np.concatenate([p._identity_coeffs() for p in parts])

    @classmethod
    def _random_coeffs(cls, rng: np.random.Generator) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return np.concatenate([p._random_coeffs(rng) for p in parts])

    @classmethod
    def _matrix(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return _block_diag([p._matrix(c[s]) for p, s in zip(parts, cls._REP_SLICES)])

    @classmethod
    def _compose(cls, c1: NDArray[np.float64], c2: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return np.concatenate([p._compose(c1[s], c2[s]) for p, s in zip(parts, cls._REP_SLICES)])

    @classmethod
    def _inverse(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return np.concatenate([p._inverse(c[s]) for p, s in zip(parts, cls._REP_SLICES)])

    @classmethod
    def _log(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return np.concatenate([p._log(c[s]) for p, s in zip(parts, cls._REP_SLICES)])

    @classmethod
    def _Ad(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return _block_diag([p._Ad(c[s]) for p, s in zip(parts, cls._REP_SLICES)])

    @classmethod
    def _exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return np.concatenate([p._exp(a[s]) for p, s in zip(parts, cls._DOF_SLICES)])

    @classmethod
    def _hat(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return _block_diag([p._hat(a[s]) for p, s in zip(parts, cls._DOF_SLICES)])

    @classmethod
    def _vee(cls, A: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return np.concatenate([p._vee(A[s, s]) for p, s in zip(parts, cls._DIM_SLICES)])

    @classmethod
    def _ad(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return _block_diag([p._ad(a[s]) for p, s in zip(parts, cls._DOF_SLICES)])

    @classmethod
    def _dr_exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return _block_diag([p._dr_exp(a[s]) for p, s in zip(parts, cls._DOF_SLICES)])

    @classmethod
    def _dr_expinv(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        parts, _ = cls._layout()
        return _block_diag([p._dr_expinv(a[s]) for p, s in zip(parts, cls._DOF_SLICES)])


@functools.lru_cache(maxsize=None)
def _bundle_class(spec: tuple[PartSpec, ...]) -> type[Bundle]:
    parts = tuple(Tn.of(p) if isinstance(p, int) else p for p in spec)
    vector = tuple(isinstance(p, int) for p in spec)
    names = ", ".join(str(p) if isinstance(p, int) else p.__name__ for p in spec)
    return type(
        f"Bundle[{names}]",
        (Bundle,),
        {
            "__slots__": (),
            "__module__": __name__,
            "__doc__": f"Direct product of {names}.",
            "_SPEC": spec,
            "_PARTS": parts,
            "_VECTOR": vector,
            "_REP_SLICES": _slices([p.REP_SIZE for p in parts]),
            "_DOF_SLICES": _slices([p.DOF for p in parts]),
            "_DIM_SLICES": _slices([p.DIM for p in parts]),
            "REP_SIZE": sum(p.REP_SIZE for p in parts),
            "DOF": sum(p.DOF for p in parts),
            "DIM": sum(p.DIM for p in parts),
        },
    )


def _bundle_from_coeffs(spec: tuple[PartSpec, ...], coeffs: list[float]) -> Bundle:
    return Bundle.of(*spec).from_coeffs(coeffs)