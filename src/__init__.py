"""estate-hub: real-estate listing marketplace backend."""
