"""
Feature modules live under this package.

Keep module boundaries clean: each module owns its models, request contracts,
repository, service and routes, while reusing platform primitives
(config, DB session, logging) from app.bizdash.
"""
