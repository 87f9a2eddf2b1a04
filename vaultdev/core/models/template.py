"""
Generated file model — produced by the config renderers.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A file rendered from fixed settings.

    Attributes:
        path:    Path relative to the working directory.
        content: Full file content. Always written as a whole-file overwrite.
        reason:  What the file is for (shown in verbose output).
    """

    path: str
    content: str
    reason: str = ""
