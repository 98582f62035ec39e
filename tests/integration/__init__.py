"""
Integration tests for the Choose-Wise Advice Service.

Test components together:
- API endpoints (FastAPI TestClient) over the real orchestrator and
  provider adapters, with provider HTTP traffic scripted through
  httpx.MockTransport
"""
