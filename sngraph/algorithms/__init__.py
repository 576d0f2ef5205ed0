"""Path search, pairwise cost caching, feasibility and profit."""
