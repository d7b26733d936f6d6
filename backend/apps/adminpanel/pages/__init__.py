"""Admin panel page controllers, one module per route."""
