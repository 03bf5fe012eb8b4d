__title__ = 'arghelper'
__license__ = 'MIT'
__version__ = "0.0.0"

from .faults import *
from .formatting import *
from .models import *
from .parsing import *
from .utils import Unset
from .validation import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info",
    "Unset",
)

# Load the exposed API of the declarations
__all__ += models.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parsing.__all__  # type: ignore[attr-defined]
# Load the exposed API of the help text renderer
__all__ += formatting.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the validation cycle
__all__ += validation.__all__  # type: ignore[attr-defined]
