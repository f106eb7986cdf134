"""
Offline analysis tooling.

- make_synthetic_data: generate the base synthetic dataset
- enrich_personas: regression report + KMeans personas -> enriched dataset
"""
