"""
Healthcare Price Transparency Backend Package.

FastAPI service that aggregates healthcare cost and access data (procedure
prices, providers, prescription drugs, emergency services, clinical trials,
telemedicine, insurance plans, medical tourism and wearable metrics) from
several upstreams into one response envelope.

Subpackages:
    - api: FastAPI route handlers and the response envelope
    - core: Configuration, cache, error taxonomy and dependencies
    - models: Pydantic schemas and enums
    - services: Aggregator plus merge, statistics and filtering helpers
    - sources: Upstream data source interfaces, fakes and HTTP clients

Modules:
    - client: Async HTTP client for the API with per-endpoint de-duplication
    - main: Application factory and ASGI entry point
"""

__version__ = "1.0.0"
