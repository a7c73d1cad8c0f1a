"""Night-window wind alert monitor for the BTA meteo station."""
