# -*- coding: utf-8 -*-
"""filetag gives a file a name derived from its content. What does that mean?
Simply, that a file called `report.txt` becomes `2cf24dba5fb0_report.txt`,
where the prefix is the start of the SHA-256 of the file's bytes.

The name can then be checked against the content at any time, and tagged
files can be copied to a set of sync locations, with every copy verified.
"""

from .__meta__ import __version__
from .copy_strategies import TagStrategy, copy_and_verify
from .digest import DIGEST_LENGTH, compute_digest
from .filetag import Tagger
from .named_artifact import NamedArtifact, build_name, extract_embedded_digest
from .replication import verify
from .settings import Settings

__all__ = (
    "DIGEST_LENGTH",
    "NamedArtifact",
    "Settings",
    "TagStrategy",
    "Tagger",
    "__version__",
    "build_name",
    "compute_digest",
    "copy_and_verify",
    "extract_embedded_digest",
    "verify",
)
