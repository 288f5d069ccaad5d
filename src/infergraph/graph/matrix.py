from __future__ import annotations

"""python-graphblas views of the graph structure."""

from typing import Dict, List, Sequence

import numpy as np
import graphblas as gb
from graphblas import Matrix, Vector

from .node import Node


def adjacency_matrix(nodes: Sequence[Node]) -> Matrix:
    """
    Matrix[BOOL] of shape (n, n): entry (i, j) is True iff node i is a parent
    of node j. Indices follow the order of ``nodes``.

    Children outside ``nodes`` raise KeyError.
    """
    n = len(nodes)
    index: Dict[int, int] = {id(node): i for i, node in enumerate(nodes)}

    rows: List[int] = []
    cols: List[int] = []
    for i, node in enumerate(nodes):
        for child in node.children:
            rows.append(i)
            cols.append(index[id(child)])

    return gb.Matrix.from_coo(
        np.asarray(rows, dtype=np.int64),
        np.asarray(cols, dtype=np.int64),
        True,
        dtype=gb.dtypes.BOOL,
        nrows=n,
        ncols=n,
    )


def is_acyclic(matrix: Matrix) -> bool:
    """
    Peel off vertices without incoming arcs until none are left (acyclic)
    or a round removes nothing (a cycle remains).

        has_in = alive.vxm(A, lor_land)
    """
    n = matrix.nrows
    if n == 0:
        return True
    alive = Vector.from_coo(
        np.arange(n, dtype=np.int64), True, dtype=gb.dtypes.BOOL, size=n
    )

    while alive.nvals:
        has_in = alive.vxm(matrix, gb.semiring.lor_land).new()
        remaining = Vector(gb.dtypes.BOOL, size=n)
        remaining(has_in.S) << alive
        if remaining.nvals == alive.nvals:
            return False
        alive = remaining
    return True
