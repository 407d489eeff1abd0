r"""@package pyremez.ipyutils

Utility functions for interactive IPython/Jupyter sessions.
"""

from .plotting import plot_error
