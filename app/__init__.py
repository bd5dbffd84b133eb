"""
Market Radar: market data, technical indicators and news risk signals.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - market: Quotes, history, fundamentals, moving averages, risk radar.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (Yahoo Finance, NewsAPI, Polygon, transformers).
    - interfaces: FastAPI routers, Pydantic schemas.
    - nlp: Shared inference pipelines and language detection.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
