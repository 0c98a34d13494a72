"""Room state, walls, doors, fixtures, and the snap/collision pipeline."""
