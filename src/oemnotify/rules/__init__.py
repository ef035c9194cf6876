"""Rule table construction and evaluation."""
