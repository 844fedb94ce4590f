"""Patient roster backend: roster views, follow-ups and portal sync."""
