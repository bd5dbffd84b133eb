"""Security middleware: response headers, URL length guard, rate limiting."""
