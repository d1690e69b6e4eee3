"""Event subscribers registered on EcotrackEventLinker."""
