"""Alumni networking core: request/offer lifecycles, list projections and live refresh."""

__version__ = "0.1.0"
