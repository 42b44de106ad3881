"""Distribution fitting: metalog, feasibility, interpolation fallback."""
