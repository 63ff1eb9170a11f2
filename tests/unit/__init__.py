"""
Unit tests for the provider resilience layer.

Test individual components in isolation:
- Error classification and retry-after extraction
- Backoff scheduling and the retry executor
- Retry observers and the circuit breaker
- Model name resolution, catalog validation and fallback selection
- The resilient invoker, with a scripted provider
"""
