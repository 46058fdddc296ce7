"""Cross-cutting helpers shared by all layers (logging, time, ids)."""
