"""Self-update support for CMS plugins driven by a remote JSON manifest."""
