"""fumadocs-migrate: rewrite Mintlify-flavoured MDX docs into Fumadocs MDX."""

__version__ = "0.1.0"
