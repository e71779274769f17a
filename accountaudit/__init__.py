"""Account audit package.

Finds stray accounts left behind by a faulty provisioning run (``jdoe`` vs
``jdoe1``) in a read-only directory snapshot and classifies each pair.

Avoid importing heavy submodules at package import time to prevent side-effects
(like logger configuration and filesystem writes) during test collection.
"""

__all__: list[str] = []
