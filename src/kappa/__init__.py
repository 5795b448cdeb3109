"""Quest progression and aggregation engine for Kappa tracking."""
