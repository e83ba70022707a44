"""Game domain services: session gate, progression, registration, coupons.

This package holds the hunt's core rules. HTTP routes and socket handlers
import from here, keeping transport concerns separated from game mechanics.
The pure pieces (``health``, ``progression.advance``) never touch the
database; everything else takes an explicit ``now`` so tests can pin time.
"""
