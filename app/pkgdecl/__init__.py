"""pkgdecl - declarative multi-backend package management.

Groups of declared packages are reconciled against what each package
manager reports as installed.
"""

__version__ = "0.1.0"
