"""Record sources. Each adapter exposes ``fetch(source_cfg) -> List[IdentityRecord]``."""
