"""Domain layer (pure logic).

- Keep draw rules, odds and display mappings here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI.
- Randomness is passed in as a RandomSource so results are reproducible in tests.
"""
