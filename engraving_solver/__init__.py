"""Soul weapon engraving auto-solver."""
