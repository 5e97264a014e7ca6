"""Binary resolver package.

Finds the worker executable among the resources bundled with the
application and materializes it as a runnable file.
"""

from ._resolver import (
    DEFAULT_FILE_NAME,
    EXECUTABLE_SUFFIX,
    MARKER_TOKEN,
    PRODUCT_TOKEN,
    BinaryResolver,
)
from ._resources import (
    CandidateResource,
    MappingResourceSet,
    PackageResourceSet,
    ResourceSet,
)

__all__ = [
    "DEFAULT_FILE_NAME",
    "EXECUTABLE_SUFFIX",
    "MARKER_TOKEN",
    "PRODUCT_TOKEN",
    "BinaryResolver",
    "CandidateResource",
    "MappingResourceSet",
    "PackageResourceSet",
    "ResourceSet",
]
