import numpy as np

from Orange.misc import DistMatrix
from .pipeline import RazorNetOptions, RazorNetResult, razor_net


# ----------------------------------------------------------------------
# Wrapper for Orange DistMatrix
# ----------------------------------------------------------------------

def razor_net_orange(dm: DistMatrix, labels=None, options: RazorNetOptions = None) -> RazorNetResult:
    """
    Run RazorNet on an Orange.misc.DistMatrix.

    Parameters
    ----------
    dm : DistMatrix
        Orange distance matrix (e.g. from Orange.distance.Euclidean(table)).
    labels : sequence of str, optional
        Taxon labels. If None, labels are taken from dm.row_items
        if available, otherwise generated as T0, T1, ...
    options : RazorNetOptions, optional

    Returns
    -------
    RazorNetResult
    """
    D = np.asarray(dm, dtype=float)

    if labels is not None:
        labels = [str(l) for l in labels]
    elif getattr(dm, "row_items", None) is not None:
        labels = [str(item) for item in dm.row_items]
    else:
        labels = [f"T{i}" for i in range(D.shape[0])]

    return razor_net(D, labels, options)
