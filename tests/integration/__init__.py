"""
Integration tests for the provider resilience layer.

Exercise the components together, with real asyncio sleeps:
- Invocation flow (validation, retry, fallback hops)
- Concurrent invocations sharing one invoker and circuit breaker
- Catalog snapshots parsed from provider listings
"""
