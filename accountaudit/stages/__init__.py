"""Audit stages: grouping, pairing, classification, recommendation.

Each stage exposes a small, pure function API; ``accountaudit.pipeline`` chains
them in one pass over an immutable record snapshot.
"""
