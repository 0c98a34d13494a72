"""Floor-plan layout and constraint engine for room and fixture design."""
