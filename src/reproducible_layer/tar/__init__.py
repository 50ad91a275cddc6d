"""Layer tar entry models, enumeration and serialization."""
