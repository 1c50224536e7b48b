"""releasenotary: notarize GitHub release assets on an immutable ledger.

Every asset of a release, including the two auto-generated source
archives, is downloaded, fingerprinted, signed on the ledger with a
freshly rotated API key of the account that produced it, and read back to
confirm the ledger recorded it.
"""

__version__ = "0.1.0"
__description__ = "Notarize and verify GitHub release assets on an immutable ledger"

from releasenotary.core.pipeline import ReleaseNotarizer

__all__ = ["ReleaseNotarizer", "__version__"]
