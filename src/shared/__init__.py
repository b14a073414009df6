"""Cross-cutting helpers shared by the content domain and the CLI."""
