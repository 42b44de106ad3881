"""Dense linear algebra and polynomial helpers."""
