"""Pure batch-run DTOs. ZERO I/O."""
