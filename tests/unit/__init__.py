"""
Unit tests for the Choose-Wise Advice Service.

Test individual components in isolation:
- Data models and API request validation
- Backoff policy and retry executor (attempt counting, delay bounds)
- Provider adapters (wire formats, failure classification via MockTransport)
- Failover orchestrator and provider chain
- Emergency advisor
- Rate limiter
"""
