"""Core data models shared across ecotrack components."""
