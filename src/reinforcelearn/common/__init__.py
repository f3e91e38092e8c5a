from .seeding import make_rng, seed_everything

__all__ = ["make_rng", "seed_everything"]
