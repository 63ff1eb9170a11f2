"""
Model-targeted invocation: validation, retries and fallback in one call.
"""

from provider_resilience.invocation.invoker import InvocationResult, ResilientInvoker

__all__ = ["InvocationResult", "ResilientInvoker"]
