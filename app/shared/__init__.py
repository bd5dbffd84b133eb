"""
Shared module package.

Contains cross-cutting concerns used across bounded contexts:
- Error handling and mapping
- Security middleware (headers, URL length)
- Rate governing and rate limiting
- Logging configuration
"""
