r"""@package pyremez.ipyutils.plotting

Helper functions for inspecting approximations visually.
"""

import os
import os.path as op

import numpy as np
import matplotlib.pyplot as plt


__all__ = [
    "plot_error",
]


def plot_error(solver, points=500, l='-k', mark_points=True, zero_line=True,
               figsize=(6, 2), title=None, save=None, ax=None, show=True,
               close=False):
    r"""Plot the weighted error of the current approximation of a solver.

    The error \f$ w(x)(f(x) - p(x)) \f$ is sampled in floating point
    precision, which suffices to judge the equioscillation as long as the
    error is well above the floating point resolution.

    @param solver
        RemezSolver with a fit, i.e. after at least one do_step().
    @param points (int or iterable, optional)
        Number of (equidistant) points for the plot. Default is `500`. May
        also be an iterable of the x-values to sample at.
    @param l (string, optional)
        Linestyle of the plotted error. Default is ``'-k'``.
    @param mark_points (boolean, optional)
        Whether to mark the current control points of the solver. Default is
        `True`.
    @param zero_line (boolean or string, optional)
        Whether to draw a line for ``y == 0``. If a string, it is used as the
        linestyle. Default is `True`.
    @param figsize (2-tuple, optional)
        Size of the plot. Default is `(6,2)`.
    @param title (string, optional)
        Title to be rendered above the plot. Default is to show the function
        and degree.
    @param save (string, optional)
        Optional filename for saving the created plot to disk. If this
        contains no dot, ``'.pdf'`` is appended.
    @param ax (Axis object, optional)
        Axis object to add the plot to. If none is given, creates a new one.
    @param show (boolean, optional)
        Whether to conclude by showing the whole plot (the default). Nothing
        is returned in this case.
    @param close (boolean, optional)
        Whether to close the figure at the end. Default is `False`. This can
        only be used if `show=False`.

    @return The axis object if neither `show` nor `close` are set.
    """
    if close and show:
        raise ValueError("Cannot close and show figures.")
    err = solver.error_function()
    if isinstance(points, int):
        xs = np.linspace(float(solver.xmin), float(solver.xmax), points)
    else:
        xs = np.asarray(list(points), dtype=float)
    ys = np.array([float(err(x)) for x in xs])
    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(111)
    else:
        fig = ax.figure
    if zero_line:
        ax.axhline(0, ls='-' if zero_line is True else zero_line,
                   color='0.7', lw=0.8, zorder=0)
    ax.plot(xs, ys, l)
    if mark_points and solver.control_points is not None:
        pts = [float(x) for x in solver.control_points]
        ax.plot(pts, [float(err(x)) for x in pts], 'o', color='tab:red',
                markersize=4)
    if title is None:
        title = "error of degree %d approximation of %s" % (solver.order,
                                                            solver.func)
    ax.set_title(title)
    ax.set_xlim(xs[0], xs[-1])
    ax.ticklabel_format(axis='y', style='sci', scilimits=(-3, 3))
    if save:
        if "." not in op.basename(save):
            save += ".pdf"
        fname = op.expanduser(save)
        dirname = op.dirname(fname)
        if dirname:
            os.makedirs(op.normpath(dirname), exist_ok=True)
        fig.savefig(fname, bbox_inches='tight')
    if show:
        plt.show()
        return None
    if close:
        plt.close(fig)
        return None
    return ax
