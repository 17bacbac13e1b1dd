"""Infrastructure adapters: storage backends and report caches."""
