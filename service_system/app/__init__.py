"""System service application package."""
