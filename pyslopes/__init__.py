"""
PySlopes: concurrent per-feature regression for Python.

Fits one origin-constrained simple linear regression per feature against
a shared target, in parallel, and pools the squared residuals of every
feature into a single mean squared error.

Submodules:
    core: Exceptions, result envelope, data sources, timing
    marginal: Per-feature (marginal) slope fitting
    cli: Command line interface
"""

from loguru import logger

__version__ = "0.1.0"
__author__ = "Hai-Shuo"
__email__ = "contact@sgcx.org"

# Library code stays silent until an application opts in
logger.disable("pyslopes")

from pyslopes import marginal
from pyslopes.marginal import fit, load_csv

__all__ = [
    "__version__",
    "marginal",
    "fit",
    "load_csv",
]
