"""
Core data and analytics layer.

This package contains:
- records: the Student record and lenient row normalization
- personas: rule-based persona inference
- data_loader: CSV loading (path or URL) with enriched -> base fallback
- analytics: correlation, overview averages, per-class averages
- query_engine: fuzzy search, column sort, single-record lookup
- views: memoized derived views used by the UI
- insights: canonical facts for the insights panel
"""
