# -*- coding: utf-8 -*-
"""Define project metadata
"""

__title__ = "filetag"
__summary__ = "Tag files with their content digest and replicate them with verification."
__url__ = "https://github.com/filetag/filetag"

__version__ = "0.3.0"

__install_requires__ = ["anyio"]
__tests_require__ = ["pytest"]

__author__ = "filetag contributors"
__email__ = "maintainers@filetag.dev"

__license__ = "MIT License"
