"""
Student analytics dashboard.

Run the dashboard with `streamlit run main.py` from the repo root.
"""

__version__ = "0.1.0"
