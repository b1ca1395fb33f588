"""
Infrastructure layer: outbound HTTP adapters, language-model client and caching.
"""
